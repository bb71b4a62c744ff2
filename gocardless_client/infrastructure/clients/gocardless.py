"""GoCardless Bank Account Data API client"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import SecretStr, TypeAdapter, ValidationError

from gocardless_client.config import settings
from gocardless_client.domain.exceptions import (
    ApiError,
    AuthenticationError,
    DecodeError,
    TransportError,
)
from gocardless_client.domain.models import (
    Account,
    AccountDetails,
    Balance,
    BalanceList,
    Credentials,
    EndUserAgreement,
    Institution,
    Requisition,
    RequisitionPage,
    Token,
    TransactionList,
    Transactions,
)
from gocardless_client.infrastructure.observability.logging import log_api_call
from gocardless_client.infrastructure.observability.metrics import record_request

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOKEN_PATH = "/api/v2/token/new/"
INSTITUTIONS_PATH = "/api/v2/institutions/"
AGREEMENTS_PATH = "/api/v2/agreements/enduser/"
REQUISITIONS_PATH = "/api/v2/requisitions/"

ACCESS_SCOPE = ("balances", "details", "transactions")

_token_adapter = TypeAdapter(Token)
_institutions_adapter = TypeAdapter(List[Institution])
_agreement_adapter = TypeAdapter(EndUserAgreement)
_requisition_adapter = TypeAdapter(Requisition)
_requisition_page_adapter = TypeAdapter(RequisitionPage)
_balances_adapter = TypeAdapter(BalanceList)
_details_adapter = TypeAdapter(AccountDetails)
_transactions_adapter = TypeAdapter(TransactionList)


def _account_path(account_id: str, resource: str) -> str:
    return f"/api/v2/accounts/{quote(account_id, safe='')}/{resource}"


def _describe_validation_error(error: ValidationError) -> str:
    # Locations only: input values may hold tokens
    locations = sorted({".".join(str(part) for part in err["loc"]) or "<body>" for err in error.errors()})
    return ", ".join(locations)


async def _call(
    http_client: httpx.AsyncClient,
    operation: str,
    method: str,
    path: str,
    adapter: TypeAdapter[T],
    *,
    access_token: Optional[str] = None,
    body: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, str]] = None,
    error_type: Type[ApiError] = ApiError,
) -> T:
    """
    Issue one request and decode the JSON response.

    Raises:
        TransportError: Request could not be sent or response not received
        ApiError: Non-2xx status (error_type lets the token call raise AuthenticationError)
        DecodeError: Body is not JSON or does not match the expected shape
    """
    headers = {"Accept": "application/json"}
    if body is not None:
        headers["Content-Type"] = "application/json"
    if access_token is not None:
        headers["Authorization"] = f"Bearer {access_token}"

    start_time = time.perf_counter()
    status_code: Optional[int] = None
    outcome = "success"
    try:
        response = await http_client.request(method, path, json=body, params=params, headers=headers)
        status_code = response.status_code
        response.raise_for_status()
        return adapter.validate_json(response.content)

    except httpx.HTTPStatusError as e:
        outcome = "api_error"
        raise error_type.from_response(e.response, operation) from e
    except httpx.RequestError as e:
        outcome = "transport_error"
        raise TransportError(f"{operation}: {type(e).__name__} calling {method} {path}: {e}") from e
    except ValidationError as e:
        outcome = "decode_error"
        raise DecodeError(f"{operation}: unexpected response shape at {_describe_validation_error(e)}") from e
    finally:
        duration = time.perf_counter() - start_time
        record_request(operation, outcome, duration)
        log_api_call(operation, method, path, status_code, round(duration * 1000, 2), outcome)


class GoCardlessClient:
    """
    Authenticated gateway to the Bank Account Data API.

    Obtain an instance with ``await GoCardlessClient.authenticate(secret_id, secret_key)``;
    the constructor requires an already minted token, so there is no
    unauthenticated client. Every method is one HTTP round trip and nothing is
    retried.
    """

    def __init__(self, http_client: httpx.AsyncClient, credentials: Credentials, token: Token):
        self._http = http_client
        self._credentials = credentials
        self._token = token
        self._token_lock = asyncio.Lock()
        self.country = settings.institutions_country

    @classmethod
    async def authenticate(
        cls,
        secret_id: Union[str, SecretStr],
        secret_key: Union[str, SecretStr],
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GoCardlessClient":
        """
        Mint an access token and return a client holding it.

        Raises:
            AuthenticationError: Credentials were rejected
            TransportError, DecodeError: As for any other call
        """
        credentials = Credentials(secret_id=secret_id, secret_key=secret_key)
        http_client = httpx.AsyncClient(
            base_url=base_url or settings.api_base,
            timeout=timeout or settings.http_timeout_seconds,
            transport=transport,
        )
        try:
            token = await cls._mint_token(http_client, credentials)
        except Exception:
            await http_client.aclose()
            raise

        logger.info("Authenticated with GoCardless", extra={"access_expires": token.access_expires})
        return cls(http_client, credentials, token)

    @staticmethod
    async def _mint_token(http_client: httpx.AsyncClient, credentials: Credentials) -> Token:
        return await _call(
            http_client,
            "create_token",
            "POST",
            TOKEN_PATH,
            _token_adapter,
            body=credentials.token_request_body(),
            error_type=AuthenticationError,
        )

    @property
    def token(self) -> Token:
        return self._token

    async def reauthenticate(self) -> Token:
        """Mint a fresh token and swap it in; concurrent callers are serialised"""
        async with self._token_lock:
            token = await self._mint_token(self._http, self._credentials)
            self._token = token
        return token

    async def _get(self, operation: str, path: str, adapter: TypeAdapter[T], params: Optional[Dict[str, str]] = None) -> T:
        return await _call(self._http, operation, "GET", path, adapter, access_token=self._token.access, params=params)

    async def _post(self, operation: str, path: str, adapter: TypeAdapter[T], body: Dict[str, Any]) -> T:
        return await _call(self._http, operation, "POST", path, adapter, access_token=self._token.access, body=body)

    async def get_institutions(self) -> List[Institution]:
        """Institutions available in the configured country"""
        return await self._get("get_institutions", INSTITUTIONS_PATH, _institutions_adapter, params={"country": self.country})

    async def create_end_user_agreement(self, institution_id: str, max_historical_days: int) -> EndUserAgreement:
        """
        Create a consent for balances, details and transactions.

        max_historical_days must be positive and should not exceed the
        institution's transaction_total_days; the API rejects larger values.
        """
        if isinstance(max_historical_days, bool) or not isinstance(max_historical_days, int) or max_historical_days <= 0:
            raise ValueError(f"max_historical_days must be a positive integer, got {max_historical_days!r}")

        return await self._post(
            "create_end_user_agreement",
            AGREEMENTS_PATH,
            _agreement_adapter,
            {
                "institution_id": institution_id,
                "max_historical_days": max_historical_days,
                "access_valid_for_days": settings.access_valid_for_days,
                "access_scope": list(ACCESS_SCOPE),
            },
        )

    async def list_requisitions(self) -> RequisitionPage:
        return await self._get("list_requisitions", REQUISITIONS_PATH, _requisition_page_adapter)

    async def get_requisition(self, requisition_id: str) -> Requisition:
        return await self._get(
            "get_requisition",
            f"{REQUISITIONS_PATH}{quote(requisition_id, safe='')}/",
            _requisition_adapter,
        )

    async def create_requisition(
        self,
        redirect: str,
        institution_id: str,
        agreement_id: str,
        reference: str,
        user_language: Optional[str] = None,
    ) -> Requisition:
        """
        Start a link session. The end user must visit the returned requisition's
        link; reference must be unique or the API answers with an ApiError.
        """
        return await self._post(
            "create_requisition",
            REQUISITIONS_PATH,
            _requisition_adapter,
            {
                "redirect": redirect,
                "institution_id": institution_id,
                "agreement": agreement_id,
                "reference": reference,
                "user_language": user_language or settings.user_language,
            },
        )

    async def list_balances(self, account_id: str) -> List[Balance]:
        result = await self._get("list_balances", _account_path(account_id, "balances"), _balances_adapter)
        return result.balances

    async def get_account_details(self, account_id: str) -> Optional[Account]:
        result = await self._get("get_account_details", _account_path(account_id, "details"), _details_adapter)
        return result.account

    async def list_transactions(self, account_id: str) -> Transactions:
        result = await self._get("list_transactions", _account_path(account_id, "transactions"), _transactions_adapter)
        return result.transactions

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "GoCardlessClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"GoCardlessClient(base_url='{self._http.base_url}', country='{self.country}')"

"""Domain models - immutable pydantic records decoded from GoCardless API responses

Provider resources (agreements, requisitions, institutions) use snake_case keys on
the wire. Account data relayed from the bank (details, balances, transactions)
uses camelCase keys, so those models carry camelCase aliases.

Every field an institution may leave out has a default: institutions differ in
what they populate and a missing field must never fail decoding.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for provider records with snake_case wire keys"""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BankRecord(BaseModel):
    """Base for bank-sourced records with camelCase wire keys"""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


# Enumerations


class RequisitionStatus(str, Enum):
    """Requisition lifecycle, transmitted as two-letter codes"""

    CREATED = "CR"
    GIVING_CONSENT = "GC"
    UNDERGOING_AUTHENTICATION = "UA"
    REJECTED = "RJ"
    SELECTING_ACCOUNTS = "SA"
    GRANTING_ACCESS = "GA"
    LINKED = "LN"
    EXPIRED = "EX"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> "RequisitionStatus":
        return cls.UNKNOWN


class AccountStatus(str, Enum):
    """Account availability; an absent status means the account is usable"""

    ENABLED = "enabled"
    DELETED = "deleted"
    BLOCKED = "blocked"  # e.g. for legal reasons
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "AccountStatus":
        return cls.UNKNOWN


class AccountUsage(str, Enum):
    PRIVATE = "PRIV"
    PROFESSIONAL = "ORGA"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> "AccountUsage":
        return cls.UNKNOWN


# Authentication


class Credentials(BaseModel):
    """Secret id/key pair used only to mint access tokens"""

    model_config = ConfigDict(frozen=True)

    secret_id: SecretStr
    secret_key: SecretStr

    def token_request_body(self) -> Dict[str, str]:
        """Body for the token endpoint, the only place raw secrets are exposed"""
        return {
            "secret_id": self.secret_id.get_secret_value(),
            "secret_key": self.secret_key.get_secret_value(),
        }


class Token(Record):
    """Access/refresh token pair; expiries are in seconds"""

    access: str = Field(repr=False)
    access_expires: int = 0
    refresh: str = Field(default="", repr=False)
    refresh_expires: int = 0


# Provider resources


class Institution(Record):
    """Bank registered with the provider"""

    id: str = ""
    name: str = ""
    bic: str = ""
    transaction_total_days: str = ""  # max history window, sent as a string
    max_access_valid_for_days: Optional[str] = None
    countries: List[str] = Field(default_factory=list)
    logo: str = ""


class EndUserAgreement(Record):
    """Consent scope and window granted by the end user"""

    id: str = ""
    created: Optional[datetime] = None
    institution_id: str = ""
    max_historical_days: int = 0
    access_valid_for_days: int = 0
    access_scope: List[str] = Field(default_factory=list)
    accepted: Optional[datetime] = None


class Requisition(Record):
    """Link session between this application and an end user's bank login"""

    id: str = ""
    created: Optional[datetime] = None
    redirect: str = ""
    status: RequisitionStatus = RequisitionStatus.CREATED
    institution_id: str = ""
    agreement: str = ""
    reference: str = ""
    accounts: List[str] = Field(default_factory=list)  # filled once linked
    user_language: str = ""
    link: str = ""
    ssn: Optional[str] = None
    account_selection: bool = False
    redirect_immediate: bool = False

    @property
    def is_linked(self) -> bool:
        return self.status is RequisitionStatus.LINKED


class RequisitionPage(Record):
    """Single page of requisitions; next/previous links are not followed"""

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[Requisition] = Field(default_factory=list)


# Bank-sourced account data


class Amount(BankRecord):
    """Monetary amount; the decimal string is kept exactly as received"""

    amount: str = ""
    currency: str = ""


class AccountReference(BankRecord):
    iban: Optional[str] = None
    bban: Optional[str] = None
    currency: Optional[str] = None


class CurrencyExchange(BankRecord):
    source_currency: Optional[str] = None
    exchange_rate: Optional[str] = None
    unit_currency: Optional[str] = None
    target_currency: Optional[str] = None
    quotation_date: Optional[date] = None


class Account(BankRecord):
    """Account details as reported by the institution"""

    resource_id: str = ""  # the institution's own id, not the provider account id
    iban: Optional[str] = None
    bban: Optional[str] = None  # for payment accounts with no IBAN
    bic: Optional[str] = None
    msisdn: Optional[str] = None  # alias via a registered mobile number
    currency: Optional[str] = None
    owner_name: Optional[str] = None
    owner_address_unstructured: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    details: Optional[str] = None
    product: Optional[str] = None
    cash_account_type: Optional[str] = None  # ISO 20022 ExternalCashAccountType1Code
    status: Optional[AccountStatus] = None
    linked_accounts: Optional[str] = None
    usage: Optional[AccountUsage] = None


class Balance(BankRecord):
    """One balance view (booked, available, ...) of an account"""

    balance_amount: Amount = Field(default_factory=Amount)
    balance_type: str = ""
    reference_date: Optional[date] = None
    credit_limit_included: Optional[bool] = None
    last_change_date_time: Optional[datetime] = None


class Transaction(BankRecord):
    """Bank transaction; which fields are present depends on the institution"""

    transaction_id: Optional[str] = None
    internal_transaction_id: Optional[str] = None
    entry_reference: Optional[str] = None
    end_to_end_id: Optional[str] = None
    booking_date: Optional[date] = None
    value_date: Optional[date] = None
    booking_date_time: Optional[datetime] = None
    value_date_time: Optional[datetime] = None
    transaction_amount: Amount = Field(default_factory=Amount)
    currency_exchange: Optional[List[CurrencyExchange]] = None
    creditor_name: Optional[str] = None
    creditor_account: Optional[AccountReference] = None
    debtor_name: Optional[str] = None
    debtor_account: Optional[AccountReference] = None
    remittance_information_unstructured: Optional[str] = None
    additional_information: Optional[str] = None
    bank_transaction_code: Optional[str] = None
    proprietary_bank_transaction_code: Optional[str] = None

    @field_validator("currency_exchange", mode="before")
    @classmethod
    def wrap_single_exchange(cls, value: Any) -> Any:
        # Some institutions send one object instead of a list
        if isinstance(value, dict):
            return [value]
        return value


class Transactions(BankRecord):
    """Settled (booked) and provisional (pending) transactions, in API order"""

    booked: List[Transaction] = Field(default_factory=list)
    pending: List[Transaction] = Field(default_factory=list)


# Response envelopes


class BalanceList(BankRecord):
    balances: List[Balance] = Field(default_factory=list)


class AccountDetails(BankRecord):
    account: Optional[Account] = None  # absent until the institution fills it in


class TransactionList(BankRecord):
    transactions: Transactions = Field(default_factory=Transactions)

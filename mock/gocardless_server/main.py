"""In-memory stand-in for the GoCardless Bank Account Data API"""

import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse

# Support both local development and Docker
DATA_DIR = Path("/gocardless_stub") if os.path.exists("/gocardless_stub") else Path(__file__).resolve().parents[1] / "gocardless_stub"

SECRET_ID = "mock-secret-id"
SECRET_KEY = "mock-secret-key"

BASE_URL = "http://gocardless.test"
LINKED_ACCOUNT_ID = "7e944232-bda9-40bc-b784-660c7ab5fe78"
SPARSE_ACCOUNT_ID = "sparse-account"


def _error(status_code: int, summary: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"summary": summary, "detail": detail, "status_code": status_code},
    )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _load(name: str) -> Optional[Any]:
    file = DATA_DIR / name
    if not file.exists():
        return None
    return json.loads(file.read_text())


def create_app() -> FastAPI:
    app = FastAPI(title="Mock GoCardless Server", version="1.0.0")
    app.state.tokens = set()
    app.state.agreements = {}
    app.state.requisitions = {}

    def authorized(authorization: Optional[str]) -> bool:
        if not authorization or not authorization.startswith("Bearer "):
            return False
        return authorization.removeprefix("Bearer ") in app.state.tokens

    def unauthorized() -> JSONResponse:
        return _error(401, "Invalid token", "Token is invalid or expired")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/v2/token/new/")
    async def create_token(request: Request):
        body = await request.json()
        if body.get("secret_id") != SECRET_ID or body.get("secret_key") != SECRET_KEY:
            return _error(401, "Authentication failed", "No active account found with the given credentials")
        access = f"access-{uuid.uuid4().hex}"
        app.state.tokens.add(access)
        return {
            "access": access,
            "access_expires": 86400,
            "refresh": f"refresh-{uuid.uuid4().hex}",
            "refresh_expires": 2592000,
        }

    @app.get("/api/v2/institutions/")
    def list_institutions(country: str, authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        return _load(f"institutions_{country.lower()}.json") or []

    @app.post("/api/v2/agreements/enduser/")
    async def create_agreement(request: Request, authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        body = await request.json()
        institutions = {inst["id"]: inst for inst in _load("institutions_gb.json") or []}
        institution = institutions.get(body.get("institution_id"))
        if institution is None:
            return _error(400, "Unknown Institution ID", "Get Institution IDs from /institutions/?country={$COUNTRY_CODE}")
        if int(body["max_historical_days"]) > int(institution["transaction_total_days"]):
            return _error(400, "Incorrect max_historical_days", "max_historical_days exceeds the institution's limit")
        agreement = {
            "id": str(uuid.uuid4()),
            "created": _now(),
            "institution_id": institution["id"],
            "max_historical_days": int(body["max_historical_days"]),
            "access_valid_for_days": int(body["access_valid_for_days"]),
            "access_scope": body["access_scope"],
            "accepted": None,
        }
        app.state.agreements[agreement["id"]] = agreement
        return JSONResponse(status_code=201, content=agreement)

    @app.get("/api/v2/requisitions/")
    def list_requisitions(authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        results = list(app.state.requisitions.values())
        return {"count": len(results), "next": None, "previous": None, "results": results}

    @app.post("/api/v2/requisitions/")
    async def create_requisition(request: Request, authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        body = await request.json()
        if any(r["reference"] == body.get("reference") for r in app.state.requisitions.values()):
            return _error(400, "Client reference must be unique", f"Reference {body.get('reference')} already exists")
        if body.get("agreement") not in app.state.agreements:
            return _error(400, "Invalid agreement", "Agreement does not exist")
        requisition_id = str(uuid.uuid4())
        requisition: Dict[str, Any] = {
            "id": requisition_id,
            "created": _now(),
            "redirect": body["redirect"],
            "status": "CR",
            "institution_id": body["institution_id"],
            "agreement": body["agreement"],
            "reference": body["reference"],
            "accounts": [],
            "user_language": body.get("user_language", "EN"),
            "link": f"https://ob.gocardless.com/psd2/start/{requisition_id}/{body['institution_id']}",
            "ssn": None,
            "account_selection": False,
            "redirect_immediate": False,
        }
        app.state.requisitions[requisition_id] = requisition
        return JSONResponse(status_code=201, content=requisition)

    @app.get("/api/v2/requisitions/{requisition_id}/")
    def get_requisition(requisition_id: str, authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        requisition = app.state.requisitions.get(requisition_id)
        if requisition is None:
            return _error(404, "Not found.", "Not found.")
        return requisition

    @app.get("/api/v2/accounts/{account_id}/{resource}")
    def get_account_resource(account_id: str, resource: str, authorization: Optional[str] = Header(None)):
        if not authorized(authorization):
            return unauthorized()
        if resource not in ("balances", "details", "transactions"):
            return _error(404, "Not found.", "Not found.")
        data = _load(f"{resource}_{account_id}.json")
        if data is None:
            return _error(404, "Account ID not found", f"Account ID {account_id} not found")
        return data

    return app


app = create_app()

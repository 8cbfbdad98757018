"""
Thin async client for the Plaid sandbox plus income summarisation.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)

MAX_SYNC_PAGES = 5
PAYSTUB_DOCUMENT_SIZE = 524288
PRODUCTS = ["income_verification", "identity", "transactions"]


class PlaidError(Exception):
    """Plaid is unconfigured, unreachable, or answered with an error."""


class PlaidClient:
    def __init__(
        self,
        client_id: str,
        secret: str,
        base_url: str = "https://sandbox.plaid.com",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client_id = client_id
        self._secret = secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        if not (self._client_id and self._secret):
            raise PlaidError("Plaid credentials are not configured.")

        payload = {"client_id": self._client_id, "secret": self._secret, **body}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(f"/{endpoint}", json=payload)
        except httpx.HTTPError as e:
            raise PlaidError(f"Plaid API unreachable ({endpoint}): {e}") from e

        if response.is_error:
            raise PlaidError(f"Plaid API error ({endpoint}): {response.status_code} {response.text}")
        return response.json()

    async def create_link_token(self, user_id: str, name: str, legal_name: Optional[str] = None) -> dict[str, Any]:
        return await self._post(
            "link/token/create",
            {
                "user": {"client_user_id": user_id, "legal_name": legal_name or name},
                "client_name": "Toyota Financial",
                "language": "en",
                "products": PRODUCTS,
                "country_codes": ["US"],
            },
        )

    async def exchange_public_token(self, public_token: str) -> dict[str, Any]:
        return await self._post("item/public_token/exchange", {"public_token": public_token})

    async def pull_recent_transactions(self, access_token: str) -> tuple[list[dict], list[dict]]:
        collected: list[dict] = []
        accounts: list[dict] = []
        cursor: Optional[str] = None
        for _ in range(MAX_SYNC_PAGES):
            body: dict[str, Any] = {"access_token": access_token, "count": 100}
            if cursor:
                body["cursor"] = cursor
            page = await self._post("transactions/sync", body)
            collected.extend(page.get("added", []))
            accounts = page.get("accounts", [])
            cursor = page.get("next_cursor")
            if not page.get("has_more"):
                break
        return collected, accounts

    async def fetch_identity(self, access_token: str) -> dict[str, Any]:
        return await self._post("identity/get", {"access_token": access_token})

    async def fetch_paystubs(self, access_token: str) -> Optional[dict[str, Any]]:
        try:
            return await self._post("income/verification/paystubs/get", {"access_token": access_token})
        except PlaidError:
            logger.warning("Unable to fetch Plaid paystubs", exc_info=True)
            return None

    async def build_plaid_summary(self, access_token: str, institution_name: Optional[str] = None) -> dict[str, Any]:
        """Collect deposits, account owners and paystubs into a snake_case summary."""
        (transactions, accounts), identity, paystubs = await asyncio.gather(
            self.pull_recent_transactions(access_token),
            self.fetch_identity(access_token),
            self.fetch_paystubs(access_token),
        )

        owners_by_account: dict[str, list[str]] = {}
        for account in identity.get("accounts", []):
            names: list[str] = []
            for owner in account.get("owners") or []:
                names.extend(owner.get("names") or [])
            owners_by_account[account["account_id"]] = names

        account_owners = [
            {
                "account_name": a.get("official_name") or a.get("name"),
                "mask": a.get("mask") or "-",
                "owners": owners_by_account.get(a["account_id"], []),
            }
            for a in accounts
        ]

        now = datetime.now(timezone.utc).isoformat()
        return {
            "recurring_deposits": summarize_deposits(transactions),
            "account_owners": account_owners,
            "paystubs": summarize_paystubs((paystubs or {}).get("paystubs", []), now, self._base_url),
            "last_synced_at": now,
            "institution_name": institution_name,
        }


def _cadence(count: int) -> str:
    if count >= 6:
        return "Bi-weekly"
    if count >= 3:
        return "Monthly"
    return "Ad-hoc"


def summarize_deposits(transactions: list[dict[str, Any]], limit: int = 4) -> list[dict[str, Any]]:
    """Group inflows (negative Plaid amounts) by payer and rank by average size."""
    grouped: dict[str, dict[str, Any]] = {}
    for txn in transactions:
        if txn["amount"] >= 0:
            continue
        key = txn.get("merchant_name") or txn["name"]
        bucket = grouped.setdefault(key, {"total": 0.0, "count": 0, "last_date": txn["date"]})
        bucket["total"] += abs(txn["amount"])
        bucket["count"] += 1
        if date.fromisoformat(txn["date"]) > date.fromisoformat(bucket["last_date"]):
            bucket["last_date"] = txn["date"]

    deposits = [
        {
            "name": name,
            "average_amount": stats["total"] / stats["count"],
            "cadence": _cadence(stats["count"]),
            "last_deposit": stats["last_date"],
        }
        for name, stats in grouped.items()
    ]
    deposits.sort(key=lambda d: d["average_amount"], reverse=True)
    return deposits[:limit]


def summarize_paystubs(paystubs: list[dict[str, Any]], verified_at: str, base_url: str) -> list[dict[str, Any]]:
    out = []
    for index, stub in enumerate(paystubs, start=1):
        gross = (stub.get("gross_earnings") or [{}])[0].get("current_amount") or 0
        net = (stub.get("net_earnings") or [{}])[0].get("current_amount") or 0
        document_id = stub.get("document_id")
        out.append({
            "employer": (stub.get("employer") or {}).get("name") or "Employer",
            "pay_date": stub.get("pay_date") or "",
            "gross_pay": gross,
            "net_pay": net,
            "document_name": f"paystub-{index}.pdf",
            "document_size": PAYSTUB_DOCUMENT_SIZE,
            "last_verified": verified_at,
            "download_url": f"{base_url}/paystubs/{document_id}.pdf" if document_id else None,
        })
    return out


def get_plaid_client() -> PlaidClient:
    return PlaidClient(
        client_id=settings.plaid_client_id,
        secret=settings.plaid_secret,
        base_url=settings.plaid_base_url,
        timeout=settings.plaid_timeout_seconds,
    )

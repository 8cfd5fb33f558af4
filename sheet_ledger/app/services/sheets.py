"""Async access to the Google Sheets ``values`` API.

Uses raw httpx against the v4 REST endpoints; google-auth only mints the
service-account bearer token.

- Read:   GET  /v4/spreadsheets/{id}/values/{range}
- Clear:  POST /v4/spreadsheets/{id}/values/{range}:clear
- Write:  PUT  /v4/spreadsheets/{id}/values/{range}?valueInputOption=RAW
- Append: POST /v4/spreadsheets/{id}/values/{range}:append?valueInputOption=RAW
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx
from google.auth.transport.requests import Request
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
_RAW_INPUT = {"valueInputOption": "RAW"}


@runtime_checkable
class SheetStore(Protocol):
    """Row-oriented store bound to a single spreadsheet.

    Ranges use A1 notation (``Sheet1!A2:K``). Any object implementing these
    methods can back ``LedgerRepository``.
    """

    async def read_range(self, range_: str) -> list[list[Any]]: ...

    async def clear_range(self, range_: str) -> None: ...

    async def write_range(self, range_: str, rows: list[list[Any]]) -> None: ...

    async def append_rows(self, range_: str, rows: list[list[Any]]) -> None: ...


class GoogleSheetsClient:
    """``SheetStore`` backed by the Google Sheets REST API.

    Credentials are built lazily on the first request, so constructing the
    client with incomplete configuration never fails.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_info: dict[str, Any],
        timeout: float = 30.0,
    ) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._service_account_info = service_account_info
        self._credentials: Optional[service_account.Credentials] = None
        self._refresh_lock = asyncio.Lock()
        self._client = httpx.AsyncClient(base_url=_BASE_URL, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    # -- auth ---------------------------------------------------------------

    def _get_credentials(self) -> service_account.Credentials:
        if self._credentials is None:
            logger.info("Creating service account credentials for %s",
                        self._service_account_info.get("client_email"))
            self._credentials = service_account.Credentials.from_service_account_info(
                self._service_account_info, scopes=_SCOPES
            )
        return self._credentials

    async def _auth_headers(self) -> dict[str, str]:
        credentials = self._get_credentials()
        if not credentials.valid:
            async with self._refresh_lock:
                # google-auth's token exchange is blocking
                if not credentials.valid:
                    await asyncio.to_thread(credentials.refresh, Request())
        return {"Authorization": f"Bearer {credentials.token}"}

    def _values_path(self, range_: str, action: str = "") -> str:
        return f"/{self._spreadsheet_id}/values/{quote(range_, safe='')}{action}"

    # -- SheetStore ---------------------------------------------------------

    async def read_range(self, range_: str) -> list[list[Any]]:
        resp = await self._client.get(
            self._values_path(range_), headers=await self._auth_headers()
        )
        resp.raise_for_status()
        # Sheets omits "values" entirely for an empty range
        return resp.json().get("values", [])

    async def clear_range(self, range_: str) -> None:
        resp = await self._client.post(
            self._values_path(range_, ":clear"),
            json={},
            headers=await self._auth_headers(),
        )
        resp.raise_for_status()

    async def write_range(self, range_: str, rows: list[list[Any]]) -> None:
        resp = await self._client.put(
            self._values_path(range_),
            params=_RAW_INPUT,
            json={"range": range_, "majorDimension": "ROWS", "values": rows},
            headers=await self._auth_headers(),
        )
        resp.raise_for_status()

    async def append_rows(self, range_: str, rows: list[list[Any]]) -> None:
        resp = await self._client.post(
            self._values_path(range_, ":append"),
            params=_RAW_INPUT,
            json={"majorDimension": "ROWS", "values": rows},
            headers=await self._auth_headers(),
        )
        resp.raise_for_status()

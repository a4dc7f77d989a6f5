"""Airtable client: paginated, timeout-bounded, retried reads of one table at a time."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from plan_viaje.config import Settings
from plan_viaje.services.planner.errors import ConfigurationError
from plan_viaje.services.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)

AIRTABLE_MAX_PAGE_SIZE = 100


class AirtableError(Exception):
    """Non-success response, or a page that still failed after its retry."""

    def __init__(self, status: int | None, message: str):
        super().__init__(f"{status}: {message}" if status else message)
        self.status = status
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message, "status": self.status}


@dataclass(frozen=True)
class AirtableConfig:
    base_id: str
    token: str
    base_url: str = "https://api.airtable.com/v0"
    view: str = ""
    page_size: int = AIRTABLE_MAX_PAGE_SIZE
    timeout: float = 9.0
    retry_delay: float = 0.45
    max_pages: int = 30

    @classmethod
    def from_settings(cls, cfg: Settings) -> "AirtableConfig":
        if not cfg.airtable_base_id or not cfg.airtable_token:
            raise ConfigurationError("Faltan variables de entorno de Airtable en el servidor.")
        return cls(
            base_id=cfg.airtable_base_id,
            token=cfg.airtable_token,
            base_url=cfg.airtable_base_url.rstrip("/"),
            view=cfg.airtable_view,
            page_size=cfg.airtable_page_size,
            timeout=cfg.airtable_timeout_seconds,
            retry_delay=cfg.airtable_retry_delay_seconds,
            max_pages=cfg.airtable_max_pages,
        )


def escape_formula_value(value: str) -> str:
    """Escape a value for use inside a single-quoted formula string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_locality_formula(municipio: str | None, zona: str | None) -> str | None:
    """Equality filter on municipio (preferred) or zona; None when neither is set."""
    clauses = []
    if municipio:
        clauses.append(f"{{municipio}}='{escape_formula_value(municipio)}'")
    elif zona:
        clauses.append(f"{{zona}}='{escape_formula_value(zona)}'")

    if not clauses:
        return None
    if len(clauses) == 1:
        return clauses[0]
    return f"AND({','.join(clauses)})"


class AirtableClient:
    """Read-only adapter for the Airtable REST API.

    Owns one httpx.AsyncClient; use as an async context manager so the
    connection pool lives exactly as long as the request that needs it.
    """

    def __init__(
        self,
        config: AirtableConfig,
        retry: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.retry = retry or RetryPolicy(delay=config.retry_delay)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AirtableClient":
        await self._get_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                headers={"Authorization": f"Bearer {self.config.token}"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _table_path(self, table: str) -> str:
        return f"/{self.config.base_id}/{quote(table, safe='')}"

    async def fetch_page(
        self,
        table: str,
        formula: str | None = None,
        page_size: int | None = None,
        offset: str | None = None,
    ) -> dict[str, Any]:
        """Fetch a single page; returns the decoded JSON body."""
        client = await self._get_client()

        size = page_size or self.config.page_size
        params: dict[str, Any] = {
            "pageSize": max(1, min(size, AIRTABLE_MAX_PAGE_SIZE)),
        }
        if formula:
            params["filterByFormula"] = formula
        if self.config.view:
            params["view"] = self.config.view
        if offset:
            params["offset"] = offset

        path = self._table_path(table)

        async def _get() -> httpx.Response:
            # httpx timeouts apply per read; this bounds the whole page
            try:
                return await asyncio.wait_for(
                    client.get(path, params=params), timeout=self.config.timeout
                )
            except asyncio.TimeoutError as e:
                raise httpx.ReadTimeout(
                    f"page exceeded {self.config.timeout:.2f}s"
                ) from e

        try:
            resp = await self.retry.run(_get, label=f"Airtable {table}")
        except httpx.HTTPError as e:
            raise AirtableError(
                None, f"Error de red al consultar Airtable ({table}): {type(e).__name__}: {e}"
            ) from e

        if resp.status_code >= 400:
            raise AirtableError(
                resp.status_code,
                f"Error al consultar Airtable ({table}): {resp.status_code} - {resp.text}",
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise AirtableError(
                resp.status_code, f"Respuesta no válida de Airtable ({table})"
            ) from e
        if not isinstance(data, dict):
            raise AirtableError(resp.status_code, f"Respuesta no válida de Airtable ({table})")
        return data

    async def fetch_all(
        self,
        table: str,
        formula: str | None = None,
        page_size: int | None = None,
        hard_limit: int | None = None,
    ) -> list[dict]:
        """Follow continuation tokens until exhausted, hard_limit reached, or max_pages hit."""
        records: list[dict] = []
        offset: str | None = None
        pages = 0

        while pages < self.config.max_pages:
            data = await self.fetch_page(table, formula, page_size, offset)
            pages += 1

            page_records = data.get("records") or []
            if isinstance(page_records, list):
                records.extend(page_records)

            if hard_limit is not None and len(records) >= hard_limit:
                records = records[:hard_limit]
                break

            offset = data.get("offset")
            if not offset:
                break
        else:
            logger.warning(
                f"Airtable {table}: stopped after {pages} pages with a continuation "
                f"token still pending ({len(records)} records)"
            )

        logger.debug(f"Airtable {table}: {len(records)} records in {pages} page(s)")
        return records

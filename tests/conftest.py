import os, sys
import asyncio
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
BACKEND = os.path.join(ROOT, "backend")
if BACKEND not in sys.path:
    sys.path.insert(0, BACKEND)

import httpx

from plan_viaje.config import Settings


def rec(record_id, **fields):
    """Raw Airtable record as returned by the list endpoint."""
    return {"id": record_id, "createdTime": "2025-01-01T00:00:00.000Z", "fields": fields}


class FakeAirtable:
    """In-memory Airtable: serves tables page by page through httpx.MockTransport.

    fail:   table -> HTTP status to answer with
    errors: table -> list of exceptions raised on successive calls (then served normally)
    loop:   tables that always hand back a continuation token
    """

    def __init__(self, tables=None, fail=None, errors=None, loop=()):
        self.tables = tables or {}
        self.fail = fail or {}
        self.errors = {k: list(v) for k, v in (errors or {}).items()}
        self.loop = set(loop)
        self.calls = []

    def calls_for(self, table):
        return [r for r in self.calls if self.table_of(r) == table]

    @staticmethod
    def table_of(request):
        return request.url.path.rsplit("/", 1)[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        table = self.table_of(request)

        pending = self.errors.get(table)
        if pending:
            raise pending.pop(0)
        if table in self.fail:
            return httpx.Response(self.fail[table], text='{"error":"boom"}')

        records = self.tables.get(table, [])
        size = int(request.url.params.get("pageSize", "100"))
        start = int(request.url.params.get("offset") or 0)

        if table in self.loop:
            return httpx.Response(200, json={"records": [], "offset": str(start + 1)})

        body = {"records": records[start:start + size]}
        if start + size < len(records):
            body["offset"] = str(start + size)
        return httpx.Response(200, json=body)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


def make_settings(**overrides):
    values = {
        "airtable_base_id": "appTEST",
        "airtable_token": "patTEST",
        "airtable_retry_delay_seconds": 0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def asyncio_event_loop():
    loop = asyncio.new_event_loop()
    try:
        yield loop
    finally:
        loop.close()

"""Tests for SQLite client store."""

from unittest.mock import patch

import aiosqlite
import pytest

from billing.core.entities import Client
from billing.core.exceptions import DatabaseError


class TestSQLiteClientStore:
    async def test_create_and_get(self, client_store, client):
        loaded = await client_store.get_client(client.id)

        assert loaded.name == "Asha"
        assert loaded.email == "asha@example.com"
        assert loaded.is_regular is True
        assert loaded.discount_percentage == 10

    async def test_get_scoped_to_company(self, client_store, client):
        assert await client_store.get_client(client.id, company_id=client.company_id + 1) is None

    async def test_list_filters(self, client_store, company, client):
        walk_in = await client_store.create_client(Client(company_id=company.id, name="Ravi"))

        assert [c.id for c in await client_store.list_clients(company.id)] == [client.id, walk_in.id]
        assert [c.name for c in await client_store.list_clients(company.id, is_regular=False)] == ["Ravi"]
        assert [c.name for c in await client_store.list_clients(company.id, client_ids=[client.id])] == ["Asha"]
        assert await client_store.list_clients(company.id, client_ids=[]) == []

    async def test_mark_regular(self, client_store, company):
        ravi = await client_store.create_client(Client(company_id=company.id, name="Ravi"))

        updated = await client_store.mark_regular(ravi.id, True, 12.5)

        assert updated.is_regular is True
        assert updated.discount_percentage == 12.5
        assert updated.standing_discount == 12.5

    async def test_mark_regular_missing(self, client_store):
        assert await client_store.mark_regular(999, True, 5) is None

    async def test_list_failure_wrapped(self, client_store, company):
        with patch(
            "billing.infrastructure.storage.sqlite.client_store.get_connection",
            side_effect=aiosqlite.OperationalError("database is locked"),
        ):
            with pytest.raises(DatabaseError) as exc_info:
                await client_store.list_clients(company.id)
        assert exc_info.value.details["operation"] == "list_clients"

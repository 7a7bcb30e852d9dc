"""Tests for client entities."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from billing.core.entities import Client, ClientRef


class TestClient:
    def test_standing_discount_only_for_regular(self):
        client = Client(company_id=1, name="Ravi", discount_percentage=15)
        assert client.standing_discount == 0.0

        client.is_regular = True
        assert client.standing_discount == 15

    def test_discount_bounded(self):
        with pytest.raises(ValidationError):
            Client(company_id=1, name="Ravi", discount_percentage=120)

    def test_snapshot_copies_current_state(self, regular_client):
        snapshot = regular_client.snapshot()
        assert snapshot.id == 1
        assert snapshot.name == "Asha"
        assert snapshot.is_regular is True
        assert snapshot.discount_percentage == 10.0

    def test_snapshot_is_frozen(self, regular_client):
        snapshot = regular_client.snapshot()
        with pytest.raises(ValidationError):
            snapshot.name = "Changed"

    def test_snapshot_unaffected_by_later_changes(self, regular_client):
        snapshot = regular_client.snapshot()
        regular_client.name = "Asha K"
        assert snapshot.name == "Asha"


class TestClientRef:
    async def test_resolve_fetches_live_client(self, regular_client):
        store = AsyncMock()
        store.get_client.return_value = regular_client

        client = await ClientRef(id=1).resolve(store)

        assert client is regular_client
        store.get_client.assert_awaited_once_with(1)

    async def test_resolve_missing_client(self):
        store = AsyncMock()
        store.get_client.return_value = None
        assert await ClientRef(id=9).resolve(store) is None

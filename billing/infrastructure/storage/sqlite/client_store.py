"""SQLite implementation of client storage."""

from datetime import datetime

import aiosqlite

from billing.config import get_logger
from billing.core.entities.client import Client
from billing.core.exceptions import DatabaseError
from billing.core.interfaces.client_store import IClientStore
from billing.infrastructure.storage.sqlite._rows import (
    parse_timestamp,
    row_float,
    to_db_timestamp,
)
from billing.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteClientStore(IClientStore):
    """SQLite implementation of client storage."""

    async def create_client(self, client: Client) -> Client:
        client.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO clients (
                    company_id, branch_id, name, email, phone, address,
                    is_regular, discount_percentage, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    client.company_id,
                    client.branch_id,
                    client.name,
                    client.email,
                    client.phone,
                    client.address,
                    int(client.is_regular),
                    client.discount_percentage,
                    to_db_timestamp(client.created_at),
                ),
            )
            client.id = cursor.lastrowid

        logger.info("client_created", client_id=client.id, company_id=client.company_id)
        return client

    async def get_client(
        self, client_id: int, company_id: int | None = None
    ) -> Client | None:
        sql = "SELECT * FROM clients WHERE id = ? AND deleted_at IS NULL"
        params: list = [client_id]
        if company_id is not None:
            sql += " AND company_id = ?"
            params.append(company_id)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
            return self._row_to_client(row) if row else None

    async def list_clients(
        self,
        company_id: int,
        is_regular: bool | None = None,
        client_ids: list[int] | None = None,
    ) -> list[Client]:
        sql = "SELECT * FROM clients WHERE company_id = ? AND deleted_at IS NULL"
        params: list = [company_id]
        if is_regular is not None:
            sql += " AND is_regular = ?"
            params.append(int(is_regular))
        if client_ids is not None:
            if not client_ids:
                return []
            sql += f" AND id IN ({','.join('?' for _ in client_ids)})"
            params.extend(client_ids)
        sql += " ORDER BY id"

        try:
            async with get_connection() as conn:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
                return [self._row_to_client(r) for r in rows]
        except aiosqlite.Error as e:
            raise DatabaseError("list_clients", str(e)) from e

    async def mark_regular(
        self, client_id: int, is_regular: bool, discount_percentage: float
    ) -> Client | None:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE clients SET is_regular = ?, discount_percentage = ?
                WHERE id = ? AND deleted_at IS NULL
                """,
                (int(is_regular), discount_percentage, client_id),
            )
            if cursor.rowcount == 0:
                return None

        logger.info(
            "client_regular_status_changed",
            client_id=client_id,
            is_regular=is_regular,
            discount_percentage=discount_percentage,
        )
        return await self.get_client(client_id)

    @staticmethod
    def _row_to_client(row: aiosqlite.Row) -> Client:
        return Client(
            id=row["id"],
            company_id=row["company_id"],
            branch_id=row["branch_id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            address=row["address"],
            is_regular=bool(row["is_regular"]),
            discount_percentage=row_float(row, "discount_percentage"),
            deleted_at=parse_timestamp(row["deleted_at"]),
            created_at=parse_timestamp(row["created_at"]) or datetime.now(),
        )

"""SQLite implementation of invoice storage."""

import asyncio
from collections.abc import Callable
from datetime import datetime

import aiosqlite

from billing.config import get_logger
from billing.core.entities.client import ClientRef, ClientSnapshot
from billing.core.entities.invoice import (
    ClientType,
    Invoice,
    InvoiceFilter,
    InvoiceUpdate,
    PaymentMethod,
    PaymentStatus,
    PricedLineItem,
)
from billing.core.exceptions import DatabaseError, InvoiceNumberConflictError
from billing.core.interfaces.invoice_store import IInvoiceStore
from billing.infrastructure.storage.sqlite._rows import (
    parse_date,
    parse_timestamp,
    row_float,
    to_db_timestamp,
)
from billing.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

# Max invoice ids per item query
ITEM_BATCH_SIZE = 500


class SQLiteInvoiceStore(IInvoiceStore):
    """
    SQLite implementation of invoice storage.

    Invoice creation for a branch is serialized twice: an in-process lock per
    branch, and BEGIN IMMEDIATE so other processes wait on SQLite's write
    lock. The UNIQUE (branch_id, invoice_number) constraint is the backstop.
    """

    def __init__(self) -> None:
        self._branch_locks: dict[int, asyncio.Lock] = {}

    def _branch_lock(self, branch_id: int) -> asyncio.Lock:
        lock = self._branch_locks.get(branch_id)
        if lock is None:
            lock = self._branch_locks[branch_id] = asyncio.Lock()
        return lock

    async def count_invoices(self, branch_id: int) -> int:
        async with get_connection() as conn:
            return await self._count(conn, branch_id)

    @staticmethod
    async def _count(conn: aiosqlite.Connection, branch_id: int) -> int:
        cursor = await conn.execute(
            "SELECT COUNT(*) FROM invoices WHERE branch_id = ?",
            (branch_id,),
        )
        row = await cursor.fetchone()
        return row[0]

    async def create_invoice(
        self, invoice: Invoice, allocate: Callable[[int], str]
    ) -> Invoice:
        now = datetime.now()
        invoice.created_at = now
        invoice.updated_at = now

        async with self._branch_lock(invoice.branch_id):
            try:
                async with get_transaction(immediate=True) as conn:
                    existing = await self._count(conn, invoice.branch_id)
                    invoice.invoice_number = allocate(existing)
                    await self._insert(conn, invoice)
            except aiosqlite.IntegrityError as e:
                if "invoice_number" in str(e):
                    raise InvoiceNumberConflictError(
                        invoice.branch_id, invoice.invoice_number
                    ) from e
                raise DatabaseError("create_invoice", str(e)) from e

        logger.info(
            "invoice_persisted",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            branch_id=invoice.branch_id,
            items=len(invoice.items),
        )
        return invoice

    async def _insert(self, conn: aiosqlite.Connection, invoice: Invoice) -> None:
        snapshot = invoice.client_snapshot
        cursor = await conn.execute(
            """
            INSERT INTO invoices (
                invoice_number, date, company_id, branch_id, client_id,
                client_name, client_email, client_phone, client_address,
                client_is_regular, client_discount_percentage, client_type,
                company_gst, subtotal, total_discount, total_gst, grand_total,
                payment_status, payment_method, notes, due_date,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                invoice.invoice_number,
                to_db_timestamp(invoice.date),
                invoice.company_id,
                invoice.branch_id,
                invoice.client_id,
                snapshot.name,
                snapshot.email,
                snapshot.phone,
                snapshot.address,
                int(snapshot.is_regular),
                snapshot.discount_percentage,
                invoice.client_type.value,
                invoice.company_gst,
                invoice.subtotal,
                invoice.total_discount,
                invoice.total_gst,
                invoice.grand_total,
                invoice.payment_status.value,
                invoice.payment_method.value,
                invoice.notes,
                invoice.due_date.isoformat() if invoice.due_date else None,
                to_db_timestamp(invoice.created_at),
                to_db_timestamp(invoice.updated_at),
            ),
        )
        invoice.id = cursor.lastrowid

        for position, item in enumerate(invoice.items):
            item.invoice_id = invoice.id
            item_cursor = await conn.execute(
                """
                INSERT INTO invoice_items (
                    invoice_id, position, category_id, subcategory_id,
                    category_name, subcategory_name, name, description,
                    quantity, unit_price, discount_percentage, discount_amount,
                    gst_rate, gst_amount, final_amount
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.invoice_id,
                    position,
                    item.category_id,
                    item.subcategory_id,
                    item.category_name,
                    item.subcategory_name,
                    item.name,
                    item.description,
                    item.quantity,
                    item.unit_price,
                    item.discount_percentage,
                    item.discount_amount,
                    item.gst_rate,
                    item.gst_amount,
                    item.final_amount,
                ),
            )
            item.id = item_cursor.lastrowid

    async def get_invoice(
        self, invoice_id: int, branch_id: int | None = None
    ) -> Invoice | None:
        sql = "SELECT * FROM invoices WHERE id = ? AND deleted_at IS NULL"
        params: list = [invoice_id]
        if branch_id is not None:
            sql += " AND branch_id = ?"
            params.append(branch_id)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
            if row is None:
                return None
            items = await self._load_items(conn, [invoice_id])
            return self._row_to_invoice(row, items.get(invoice_id, []))

    async def list_invoices(self, query: InvoiceFilter) -> list[Invoice]:
        clauses: list[str] = []
        params: list = []
        if query.exclude_deleted:
            clauses.append("deleted_at IS NULL")
        if query.company_id is not None:
            clauses.append("company_id = ?")
            params.append(query.company_id)
        if query.branch_id is not None:
            clauses.append("branch_id = ?")
            params.append(query.branch_id)
        if query.client_ids is not None:
            if not query.client_ids:
                return []
            clauses.append(f"client_id IN ({','.join('?' for _ in query.client_ids)})")
            params.extend(query.client_ids)
        if query.client_type is not None:
            clauses.append("client_type = ?")
            params.append(query.client_type.value)
        if query.payment_status is not None:
            clauses.append("payment_status = ?")
            params.append(query.payment_status.value)
        if query.start is not None:
            clauses.append("date >= ?")
            params.append(to_db_timestamp(query.start))
        if query.end is not None:
            clauses.append("date <= ?")
            params.append(to_db_timestamp(query.end))

        sql = "SELECT * FROM invoices"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY date, id"
        if query.limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([query.limit, query.offset])

        try:
            async with get_connection() as conn:
                cursor = await conn.execute(sql, params)
                rows = await cursor.fetchall()
                items = await self._load_items(conn, [r["id"] for r in rows])
                return [self._row_to_invoice(r, items.get(r["id"], [])) for r in rows]
        except aiosqlite.Error as e:
            raise DatabaseError("list_invoices", str(e)) from e

    async def update_invoice(
        self, invoice_id: int, update: InvoiceUpdate
    ) -> Invoice | None:
        changes = update.model_dump(exclude_none=True)
        if changes:
            assignments = []
            params: list = []
            for field, value in changes.items():
                assignments.append(f"{field} = ?")
                if isinstance(value, (PaymentStatus, PaymentMethod)):
                    value = value.value
                elif field == "due_date":
                    value = value.isoformat()
                params.append(value)
            assignments.append("updated_at = ?")
            params.extend([to_db_timestamp(datetime.now()), invoice_id])

            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    UPDATE invoices SET {', '.join(assignments)}
                    WHERE id = ? AND deleted_at IS NULL
                    """,
                    params,
                )
                if cursor.rowcount == 0:
                    return None
            logger.info("invoice_updated", invoice_id=invoice_id, fields=list(changes))

        return await self.get_invoice(invoice_id)

    async def soft_delete_invoice(self, invoice_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE invoices SET deleted_at = ?, updated_at = ?
                WHERE id = ? AND deleted_at IS NULL
                """,
                (to_db_timestamp(datetime.now()), to_db_timestamp(datetime.now()), invoice_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("invoice_deleted", invoice_id=invoice_id)
        return deleted

    async def _load_items(
        self, conn: aiosqlite.Connection, invoice_ids: list[int]
    ) -> dict[int, list[PricedLineItem]]:
        items: dict[int, list[PricedLineItem]] = {}
        for start in range(0, len(invoice_ids), ITEM_BATCH_SIZE):
            batch = invoice_ids[start : start + ITEM_BATCH_SIZE]
            cursor = await conn.execute(
                f"""
                SELECT * FROM invoice_items
                WHERE invoice_id IN ({','.join('?' for _ in batch)})
                ORDER BY invoice_id, position, id
                """,
                batch,
            )
            for row in await cursor.fetchall():
                items.setdefault(row["invoice_id"], []).append(self._row_to_item(row))
        return items

    @staticmethod
    def _row_to_invoice(row: aiosqlite.Row, items: list[PricedLineItem]) -> Invoice:
        return Invoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            date=parse_timestamp(row["date"]) or datetime.now(),
            company_id=row["company_id"],
            branch_id=row["branch_id"],
            client_ref=ClientRef(id=row["client_id"]),
            client_snapshot=ClientSnapshot(
                id=row["client_id"],
                name=row["client_name"],
                email=row["client_email"],
                phone=row["client_phone"],
                address=row["client_address"],
                is_regular=bool(row["client_is_regular"]),
                discount_percentage=row_float(row, "client_discount_percentage"),
            ),
            client_type=ClientType(row["client_type"]),
            company_gst=row["company_gst"],
            items=items,
            subtotal=row_float(row, "subtotal"),
            total_discount=row_float(row, "total_discount"),
            total_gst=row_float(row, "total_gst"),
            grand_total=row_float(row, "grand_total"),
            payment_status=PaymentStatus(row["payment_status"]),
            payment_method=PaymentMethod(row["payment_method"]),
            notes=row["notes"],
            due_date=parse_date(row["due_date"]),
            deleted_at=parse_timestamp(row["deleted_at"]),
            created_at=parse_timestamp(row["created_at"]) or datetime.now(),
            updated_at=parse_timestamp(row["updated_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> PricedLineItem:
        return PricedLineItem(
            id=row["id"],
            invoice_id=row["invoice_id"],
            category_id=row["category_id"],
            subcategory_id=row["subcategory_id"],
            category_name=row["category_name"],
            subcategory_name=row["subcategory_name"],
            name=row["name"],
            description=row["description"],
            quantity=row["quantity"] or 1,
            unit_price=row_float(row, "unit_price"),
            discount_percentage=row_float(row, "discount_percentage"),
            discount_amount=row_float(row, "discount_amount"),
            gst_rate=row_float(row, "gst_rate"),
            gst_amount=row_float(row, "gst_amount"),
            final_amount=row["final_amount"],
        )

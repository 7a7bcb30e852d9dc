"""SQLite implementation of company, branch and catalog storage."""

from datetime import datetime

import aiosqlite

from billing.config import get_logger
from billing.core.entities.catalog import Branch, Category, Company, Subcategory
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.infrastructure.storage.sqlite._rows import (
    parse_timestamp,
    row_float,
    to_db_timestamp,
)
from billing.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteCatalogStore(ICatalogStore):
    """SQLite implementation of tenant and catalog storage."""

    async def create_company(self, company: Company) -> Company:
        company.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO companies (
                    name, gst_number, address, owner_name, phone, email, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    company.name,
                    company.gst_number,
                    company.address,
                    company.owner_name,
                    company.phone,
                    company.email,
                    to_db_timestamp(company.created_at),
                ),
            )
            company.id = cursor.lastrowid

        logger.info("company_created", company_id=company.id)
        return company

    async def get_company(self, company_id: int) -> Company | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM companies WHERE id = ? AND deleted_at IS NULL",
                (company_id,),
            )
            row = await cursor.fetchone()
            return self._row_to_company(row) if row else None

    async def create_branch(self, branch: Branch) -> Branch:
        branch.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO branches (
                    company_id, name, location, manager_name, is_default, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    branch.company_id,
                    branch.name,
                    branch.location,
                    branch.manager_name,
                    int(branch.is_default),
                    to_db_timestamp(branch.created_at),
                ),
            )
            branch.id = cursor.lastrowid
            for category in branch.categories:
                category.branch_id = branch.id
                await self._insert_category(conn, category)

        logger.info("branch_created", branch_id=branch.id, company_id=branch.company_id)
        return branch

    async def get_branch(
        self, branch_id: int, company_id: int | None = None
    ) -> Branch | None:
        sql = "SELECT * FROM branches WHERE id = ? AND deleted_at IS NULL"
        params: list = [branch_id]
        if company_id is not None:
            sql += " AND company_id = ?"
            params.append(company_id)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
            if row is None:
                return None
            categories = await self._load_catalog(conn, [branch_id])
            return self._row_to_branch(row, categories.get(branch_id, []))

    async def list_branches(self, company_id: int) -> list[Branch]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM branches
                WHERE company_id = ? AND deleted_at IS NULL
                ORDER BY id
                """,
                (company_id,),
            )
            rows = await cursor.fetchall()
            catalogs = await self._load_catalog(conn, [r["id"] for r in rows])
            return [self._row_to_branch(r, catalogs.get(r["id"], [])) for r in rows]

    async def add_category(self, category: Category) -> Category:
        async with get_transaction() as conn:
            await self._insert_category(conn, category)
        logger.info(
            "category_added",
            category_id=category.id,
            branch_id=category.branch_id,
            subcategories=len(category.subcategories),
        )
        return category

    async def add_subcategory(self, subcategory: Subcategory) -> Subcategory:
        async with get_transaction() as conn:
            await self._insert_subcategory(conn, subcategory)
        logger.info(
            "subcategory_added",
            subcategory_id=subcategory.id,
            category_id=subcategory.category_id,
        )
        return subcategory

    async def soft_delete_category(self, branch_id: int, category_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE categories SET deleted_at = ?
                WHERE id = ? AND branch_id = ? AND deleted_at IS NULL
                """,
                (to_db_timestamp(datetime.now()), category_id, branch_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("category_deleted", category_id=category_id, branch_id=branch_id)
        return deleted

    async def soft_delete_subcategory(
        self, category_id: int, subcategory_id: int
    ) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE subcategories SET deleted_at = ?
                WHERE id = ? AND category_id = ? AND deleted_at IS NULL
                """,
                (to_db_timestamp(datetime.now()), subcategory_id, category_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(
                "subcategory_deleted",
                subcategory_id=subcategory_id,
                category_id=category_id,
            )
        return deleted

    async def _insert_category(
        self, conn: aiosqlite.Connection, category: Category
    ) -> None:
        cursor = await conn.execute(
            "INSERT INTO categories (branch_id, name) VALUES (?, ?)",
            (category.branch_id, category.name),
        )
        category.id = cursor.lastrowid
        for subcategory in category.subcategories:
            subcategory.category_id = category.id
            await self._insert_subcategory(conn, subcategory)

    @staticmethod
    async def _insert_subcategory(
        conn: aiosqlite.Connection, subcategory: Subcategory
    ) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO subcategories (
                category_id, name, description, price, discount, gst
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                subcategory.category_id,
                subcategory.name,
                subcategory.description,
                subcategory.price,
                subcategory.discount,
                subcategory.gst,
            ),
        )
        subcategory.id = cursor.lastrowid

    async def _load_catalog(
        self, conn: aiosqlite.Connection, branch_ids: list[int]
    ) -> dict[int, list[Category]]:
        """Categories with subcategories per branch, deleted ones included."""
        if not branch_ids:
            return {}
        placeholders = ",".join("?" for _ in branch_ids)

        cursor = await conn.execute(
            f"SELECT * FROM categories WHERE branch_id IN ({placeholders}) ORDER BY id",
            branch_ids,
        )
        category_rows = await cursor.fetchall()
        if not category_rows:
            return {}

        category_ids = [r["id"] for r in category_rows]
        sub_placeholders = ",".join("?" for _ in category_ids)
        cursor = await conn.execute(
            f"""
            SELECT * FROM subcategories
            WHERE category_id IN ({sub_placeholders})
            ORDER BY id
            """,
            category_ids,
        )
        subcategories: dict[int, list[Subcategory]] = {}
        for row in await cursor.fetchall():
            subcategories.setdefault(row["category_id"], []).append(
                self._row_to_subcategory(row)
            )

        catalogs: dict[int, list[Category]] = {}
        for row in category_rows:
            catalogs.setdefault(row["branch_id"], []).append(
                Category(
                    id=row["id"],
                    branch_id=row["branch_id"],
                    name=row["name"],
                    subcategories=subcategories.get(row["id"], []),
                    deleted_at=parse_timestamp(row["deleted_at"]),
                )
            )
        return catalogs

    @staticmethod
    def _row_to_company(row: aiosqlite.Row) -> Company:
        return Company(
            id=row["id"],
            name=row["name"],
            gst_number=row["gst_number"],
            address=row["address"],
            owner_name=row["owner_name"],
            phone=row["phone"],
            email=row["email"],
            deleted_at=parse_timestamp(row["deleted_at"]),
            created_at=parse_timestamp(row["created_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_branch(row: aiosqlite.Row, categories: list[Category]) -> Branch:
        return Branch(
            id=row["id"],
            company_id=row["company_id"],
            name=row["name"],
            location=row["location"],
            manager_name=row["manager_name"],
            is_default=bool(row["is_default"]),
            categories=categories,
            deleted_at=parse_timestamp(row["deleted_at"]),
            created_at=parse_timestamp(row["created_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_subcategory(row: aiosqlite.Row) -> Subcategory:
        return Subcategory(
            id=row["id"],
            category_id=row["category_id"],
            name=row["name"],
            description=row["description"],
            price=row_float(row, "price"),
            discount=row_float(row, "discount"),
            gst=row_float(row, "gst"),
            deleted_at=parse_timestamp(row["deleted_at"]),
        )

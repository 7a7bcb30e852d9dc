"""Tests for SQLite catalog store."""

from billing.core.entities import Branch, Category, Subcategory


class TestCompanies:
    async def test_create_and_get(self, catalog_store, company):
        assert company.id is not None

        loaded = await catalog_store.get_company(company.id)

        assert loaded.name == "Glow Salons"
        assert loaded.gst_number == "29ABCDE1234F1Z5"

    async def test_get_missing(self, catalog_store):
        assert await catalog_store.get_company(999) is None


class TestBranches:
    async def test_create_with_catalog(self, catalog_store, branch):
        loaded = await catalog_store.get_branch(branch.id)

        assert loaded.name == "Downtown"
        assert [c.name for c in loaded.categories] == ["Haircut", "Spa"]
        haircut = loaded.categories[0]
        assert [s.name for s in haircut.subcategories] == ["Men", "Women"]
        assert haircut.subcategories[1].price == 250
        assert haircut.subcategories[1].gst == 18

    async def test_scoped_to_company(self, catalog_store, company, branch):
        assert await catalog_store.get_branch(branch.id, company_id=company.id) is not None
        assert await catalog_store.get_branch(branch.id, company_id=company.id + 1) is None

    async def test_list_branches(self, catalog_store, company, branch):
        await catalog_store.create_branch(Branch(company_id=company.id, name="Uptown"))

        branches = await catalog_store.list_branches(company.id)

        assert [b.name for b in branches] == ["Downtown", "Uptown"]
        assert branches[1].categories == []


class TestCatalogChanges:
    async def test_add_category_and_subcategory(self, catalog_store, branch):
        category = await catalog_store.add_category(Category(branch_id=branch.id, name="Nails"))
        sub = await catalog_store.add_subcategory(
            Subcategory(category_id=category.id, name="Manicure", price=400)
        )

        loaded = await catalog_store.get_branch(branch.id)

        nails = loaded.get_category(category.id)
        assert nails.name == "Nails"
        assert nails.get_subcategory(sub.id).price == 400

    async def test_soft_delete_category_keeps_row(self, catalog_store, branch):
        spa = branch.categories[1]

        assert await catalog_store.soft_delete_category(branch.id, spa.id) is True
        assert await catalog_store.soft_delete_category(branch.id, spa.id) is False

        loaded = await catalog_store.get_branch(branch.id)
        assert loaded.get_category(spa.id).deleted_at is not None
        assert [c.name for c in loaded.live_categories()] == ["Haircut"]

    async def test_soft_delete_category_of_other_branch(self, catalog_store, branch):
        assert await catalog_store.soft_delete_category(branch.id + 1, branch.categories[0].id) is False

    async def test_soft_delete_subcategory(self, catalog_store, branch):
        haircut = branch.categories[0]
        men = haircut.subcategories[0]

        assert await catalog_store.soft_delete_subcategory(haircut.id, men.id) is True

        loaded = await catalog_store.get_branch(branch.id)
        assert [s.name for s in loaded.get_category(haircut.id).live_subcategories()] == ["Women"]

"""Abstract interface for company, branch and catalog storage."""

from abc import ABC, abstractmethod

from billing.core.entities.catalog import Branch, Category, Company, Subcategory


class ICatalogStore(ABC):
    """Interface for tenant and branch catalog persistence.

    Every fetch excludes soft-deleted companies and branches. Branches are
    returned with their full catalog, deleted categories and subcategories
    included, so callers can tell "missing" from "deleted".
    """

    @abstractmethod
    async def create_company(self, company: Company) -> Company:
        """Create a company."""
        pass

    @abstractmethod
    async def get_company(self, company_id: int) -> Company | None:
        """Get company by ID."""
        pass

    @abstractmethod
    async def create_branch(self, branch: Branch) -> Branch:
        """Create a branch (without catalog)."""
        pass

    @abstractmethod
    async def get_branch(
        self, branch_id: int, company_id: int | None = None
    ) -> Branch | None:
        """Get branch by ID with its nested catalog, optionally scoped to a company."""
        pass

    @abstractmethod
    async def list_branches(self, company_id: int) -> list[Branch]:
        """List a company's live branches with their catalogs."""
        pass

    @abstractmethod
    async def add_category(self, category: Category) -> Category:
        """Add a category (and any subcategories it carries) to a branch."""
        pass

    @abstractmethod
    async def add_subcategory(self, subcategory: Subcategory) -> Subcategory:
        """Add a subcategory to a category."""
        pass

    @abstractmethod
    async def soft_delete_category(self, branch_id: int, category_id: int) -> bool:
        """Mark a category deleted. Returns False if it was not live."""
        pass

    @abstractmethod
    async def soft_delete_subcategory(
        self, category_id: int, subcategory_id: int
    ) -> bool:
        """Mark a subcategory deleted. Returns False if it was not live."""
        pass

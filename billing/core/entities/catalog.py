"""Company, branch and catalog domain entities.

A branch exclusively owns its categories, and a category exclusively owns its
subcategories. Lookups by id walk the owned collections directly.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Company(BaseModel):
    """A tenant owning branches and clients."""

    id: int | None = None
    name: str
    gst_number: str
    address: str = ""
    owner_name: str = ""
    phone: str = ""
    email: str = ""
    deleted_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class Subcategory(BaseModel):
    """A priced, GST-rated sellable product under a category."""

    id: int | None = None
    category_id: int | None = None
    name: str
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    discount: float = Field(default=0.0, ge=0)  # catalog discount percentage
    gst: float = Field(default=0.0, ge=0)  # GST rate percentage
    deleted_at: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None


class Category(BaseModel):
    """A named group of subcategories inside a branch catalog."""

    id: int | None = None
    branch_id: int | None = None
    name: str
    subcategories: list[Subcategory] = Field(default_factory=list)
    deleted_at: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.deleted_at is None

    def get_subcategory(self, subcategory_id: int) -> Subcategory | None:
        """Return the subcategory with this id, deleted or not."""
        for sub in self.subcategories:
            if sub.id == subcategory_id:
                return sub
        return None

    def live_subcategories(self) -> list[Subcategory]:
        return [s for s in self.subcategories if s.is_live]


class Branch(BaseModel):
    """A company location owning a catalog and serving clients."""

    id: int | None = None
    company_id: int
    name: str
    location: str = ""
    manager_name: str = ""
    is_default: bool = False
    categories: list[Category] = Field(default_factory=list)
    deleted_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    def get_category(self, category_id: int) -> Category | None:
        """Return the category with this id, deleted or not."""
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        return None

    def live_categories(self) -> list[Category]:
        return [c for c in self.categories if c.is_live]


class CatalogEntry(BaseModel):
    """A resolved, live subcategory ready for pricing."""

    model_config = {"frozen": True}

    category_id: int
    category_name: str
    subcategory_id: int
    name: str
    description: str = ""
    unit_price: float
    gst_rate: float = 0.0

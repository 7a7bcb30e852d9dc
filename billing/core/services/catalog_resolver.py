"""
Catalog resolution.

Maps a (category id, subcategory id) pair to the live catalog entry of a
branch. A subcategory is usable only while both it and its parent category
are live.
"""

from billing.core.entities.catalog import Branch, CatalogEntry
from billing.core.exceptions import CategoryNotFoundError, SubcategoryNotFoundError


def resolve(branch: Branch, category_id: int, subcategory_id: int) -> CatalogEntry:
    """
    Resolve a live catalog entry from the branch's owned catalog.

    Raises:
        CategoryNotFoundError: category missing from the branch or soft-deleted.
        SubcategoryNotFoundError: subcategory missing from the category or
            soft-deleted.
    """
    category = branch.get_category(category_id)
    if category is None or not category.is_live:
        raise CategoryNotFoundError(category_id, branch_id=branch.id)

    subcategory = category.get_subcategory(subcategory_id)
    if subcategory is None or not subcategory.is_live:
        raise SubcategoryNotFoundError(subcategory_id, category_id=category_id)

    return CatalogEntry(
        category_id=category_id,
        category_name=category.name,
        subcategory_id=subcategory_id,
        name=subcategory.name,
        description=subcategory.description,
        unit_price=subcategory.price,
        gst_rate=subcategory.gst,
    )

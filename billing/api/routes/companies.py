"""Company, branch and catalog endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from billing.api.dependencies import get_catalog
from billing.application.dto.requests import (
    CreateBranchRequest,
    CreateCategoryRequest,
    CreateCompanyRequest,
    CreateSubcategoryRequest,
)
from billing.application.dto.responses import (
    BranchResponse,
    CategoryResponse,
    CompanyResponse,
    ErrorResponse,
    SubcategoryResponse,
)
from billing.config import get_logger
from billing.core.entities.catalog import Branch, Category, Company, Subcategory
from billing.core.exceptions import (
    BranchNotFoundError,
    CategoryNotFoundError,
    CompanyNotFoundError,
    SubcategoryNotFoundError,
)
from billing.core.interfaces import ICatalogStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/companies", tags=["companies"])


def _category_to_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,  # type: ignore[arg-type]
        name=category.name,
        subcategories=[
            SubcategoryResponse.model_validate(sub) for sub in category.live_subcategories()
        ],
    )


def branch_to_response(branch: Branch) -> BranchResponse:
    """Branch with only its live catalog."""
    return BranchResponse(
        id=branch.id,  # type: ignore[arg-type]
        company_id=branch.company_id,
        name=branch.name,
        location=branch.location,
        manager_name=branch.manager_name,
        is_default=branch.is_default,
        categories=[_category_to_response(c) for c in branch.live_categories()],
        created_at=branch.created_at,
    )


def _new_subcategory(request: CreateSubcategoryRequest) -> Subcategory:
    return Subcategory(**request.model_dump())


async def _require_branch(store: ICatalogStore, company_id: int, branch_id: int) -> Branch:
    branch = await store.get_branch(branch_id, company_id=company_id)
    if branch is None:
        raise BranchNotFoundError(branch_id)
    return branch


def _require_live_category(branch: Branch, category_id: int) -> Category:
    category = branch.get_category(category_id)
    if category is None or not category.is_live:
        raise CategoryNotFoundError(category_id, branch_id=branch.id)
    return category


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_company(
    request: CreateCompanyRequest,
    store: ICatalogStore = Depends(get_catalog),
) -> CompanyResponse:
    """Register a company."""
    company = await store.create_company(Company(**request.model_dump()))
    return CompanyResponse.model_validate(company)


@router.post(
    "/{company_id}/branches",
    response_model=BranchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_branch(
    company_id: int,
    request: CreateBranchRequest,
    store: ICatalogStore = Depends(get_catalog),
) -> BranchResponse:
    """Open a branch, optionally with an initial catalog."""
    if await store.get_company(company_id) is None:
        raise CompanyNotFoundError(company_id)

    branch = Branch(
        company_id=company_id,
        name=request.name,
        location=request.location,
        manager_name=request.manager_name,
        is_default=request.is_default,
        categories=[
            Category(
                name=cat.name,
                subcategories=[_new_subcategory(s) for s in cat.subcategories],
            )
            for cat in request.categories
        ],
    )
    branch = await store.create_branch(branch)
    return branch_to_response(branch)


@router.get(
    "/{company_id}/branches/{branch_id}",
    response_model=BranchResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_branch(
    company_id: int,
    branch_id: int,
    store: ICatalogStore = Depends(get_catalog),
) -> BranchResponse:
    """Get a branch with its live catalog."""
    return branch_to_response(await _require_branch(store, company_id, branch_id))


@router.post(
    "/{company_id}/branches/{branch_id}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def add_category(
    company_id: int,
    branch_id: int,
    request: CreateCategoryRequest,
    store: ICatalogStore = Depends(get_catalog),
) -> CategoryResponse:
    """Add a category to the branch catalog."""
    await _require_branch(store, company_id, branch_id)
    category = await store.add_category(
        Category(
            branch_id=branch_id,
            name=request.name,
            subcategories=[_new_subcategory(s) for s in request.subcategories],
        )
    )
    return _category_to_response(category)


@router.delete(
    "/{company_id}/branches/{branch_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_category(
    company_id: int,
    branch_id: int,
    category_id: int,
    store: ICatalogStore = Depends(get_catalog),
) -> Response:
    """Soft-delete a category; past invoices keep their lines."""
    await _require_branch(store, company_id, branch_id)
    if not await store.soft_delete_category(branch_id, category_id):
        raise CategoryNotFoundError(category_id, branch_id=branch_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{company_id}/branches/{branch_id}/categories/{category_id}/subcategories",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def add_subcategory(
    company_id: int,
    branch_id: int,
    category_id: int,
    request: CreateSubcategoryRequest,
    store: ICatalogStore = Depends(get_catalog),
) -> SubcategoryResponse:
    """Add a product to a live category."""
    branch = await _require_branch(store, company_id, branch_id)
    _require_live_category(branch, category_id)

    subcategory = _new_subcategory(request)
    subcategory.category_id = category_id
    subcategory = await store.add_subcategory(subcategory)
    return SubcategoryResponse.model_validate(subcategory)


@router.delete(
    "/{company_id}/branches/{branch_id}/categories/{category_id}/subcategories/{subcategory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_subcategory(
    company_id: int,
    branch_id: int,
    category_id: int,
    subcategory_id: int,
    store: ICatalogStore = Depends(get_catalog),
) -> Response:
    """Soft-delete a product."""
    branch = await _require_branch(store, company_id, branch_id)
    _require_live_category(branch, category_id)
    if not await store.soft_delete_subcategory(category_id, subcategory_id):
        raise SubcategoryNotFoundError(subcategory_id, category_id=category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

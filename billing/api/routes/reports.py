"""Revenue, client portfolio and sales report endpoints."""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query

from billing.api.dependencies import (
    get_client_portfolio_use_case,
    get_revenue_report_use_case,
    get_sales_report_use_case,
)
from billing.application.dto.requests import (
    ClientPortfolioRequest,
    RevenueReportRequest,
    SalesReportRequest,
)
from billing.application.dto.responses import (
    ClientPortfolioResponse,
    ErrorResponse,
    RevenueReportResponse,
    SalesReportResponse,
)
from billing.application.use_cases import (
    GenerateRevenueReportUseCase,
    GenerateSalesReportUseCase,
    GetClientPortfolioUseCase,
)

router = APIRouter(prefix="/api/companies/{company_id}", tags=["reports"])


@router.get(
    "/branches/{branch_id}/report",
    response_model=RevenueReportResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def revenue_report(
    company_id: int,
    branch_id: int,
    client_type: str = Query(default="all", alias="clientType"),
    date_range: str | None = Query(default=None, alias="dateRange"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    use_case: GenerateRevenueReportUseCase = Depends(get_revenue_report_use_case),
) -> RevenueReportResponse:
    """
    Branch revenue report.

    Period totals (today, yesterday, this/last week, this/last month),
    category and subcategory performance, top clients and recommendations.
    A custom range needs both startDate and endDate; otherwise dateRange
    picks 7d, 30d or 90d.
    """
    request = RevenueReportRequest(
        client_type=client_type,
        date_range=date_range,
        start_date=start_date,
        end_date=end_date,
    )
    result = await use_case.execute(company_id, branch_id, request)
    return use_case.to_response(result)


@router.get(
    "/branches/{branch_id}/client-portfolio",
    response_model=ClientPortfolioResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def client_portfolio(
    company_id: int,
    branch_id: int,
    client_type: str = Query(default="all", alias="clientType"),
    date_range: Literal["7d", "30d", "90d", "all"] = Query(default="30d", alias="dateRange"),
    use_case: GetClientPortfolioUseCase = Depends(get_client_portfolio_use_case),
) -> ClientPortfolioResponse:
    """Regular vs non-regular client analytics for the branch."""
    request = ClientPortfolioRequest(client_type=client_type, date_range=date_range)
    result = await use_case.execute(company_id, branch_id, request)
    return use_case.to_response(result)


@router.get(
    "/reports/sales",
    response_model=SalesReportResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def sales_report(
    company_id: int,
    branch_id: int | None = Query(default=None, alias="branchId"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    use_case: GenerateSalesReportUseCase = Depends(get_sales_report_use_case),
) -> SalesReportResponse:
    """Daily sales and per-product totals across the company's branches."""
    request = SalesReportRequest(branch_id=branch_id, start_date=start_date, end_date=end_date)
    result = await use_case.execute(company_id, request)
    return use_case.to_response(result)

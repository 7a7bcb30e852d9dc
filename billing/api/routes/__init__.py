"""API route modules."""

from billing.api.routes.clients import router as clients_router
from billing.api.routes.companies import router as companies_router
from billing.api.routes.health import router as health_router
from billing.api.routes.invoices import router as invoices_router
from billing.api.routes.reports import router as reports_router

__all__ = [
    "health_router",
    "companies_router",
    "clients_router",
    "invoices_router",
    "reports_router",
]

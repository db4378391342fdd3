from pdfmarket.api.http.health import router as health_router
from pdfmarket.api.http.auth import router as auth_router
from pdfmarket.api.http.pdfs import router as pdfs_router
from pdfmarket.api.http.purchases import router as purchases_router
from pdfmarket.api.http.admin import router as admin_router

__all__ = [
    "health_router",
    "auth_router",
    "pdfs_router",
    "purchases_router",
    "admin_router"
]

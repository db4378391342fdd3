import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdfmarket.api.http import (
    admin_router, auth_router, health_router, pdfs_router, purchases_router
)
from pdfmarket.core.config import settings
from pdfmarket.core.db import SessionLocal, get_file_storage, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    await init_db()

    if settings.seed_demo_data:
        from pdfmarket.db.seed import seed_demo_data
        from pdfmarket.db.unit_of_work import SqlAlchemyUnitOfWork

        async with SessionLocal() as session:
            if not await seed_demo_data(SqlAlchemyUnitOfWork(session), get_file_storage()):
                logger.info("Database is not empty, demo data skipped")

    yield


app = FastAPI(
    title="PdfMarket",
    description="Маркетплейс PDF-документов за баллы",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(pdfs_router)
app.include_router(purchases_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "PdfMarket API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }

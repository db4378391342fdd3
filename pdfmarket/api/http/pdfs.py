import io
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from pydantic import ValidationError

from pdfmarket.core.auth import get_current_user, get_optional_user
from pdfmarket.core.config import settings
from pdfmarket.core.db import get_file_storage, get_uow
from pdfmarket.core.exceptions import NotFoundError
from pdfmarket.domains.catalog.access import EntitlementChecker
from pdfmarket.domains.catalog.downloads import DownloadResolver
from pdfmarket.domains.catalog.entities import DEFAULT_FILE_NAME
from pdfmarket.domains.catalog.schemas import (
    PdfDetails, PdfFilterRequest, PdfSummary, UpdatePdfRequest,
    UploadPdfRequest, UploadPdfResponse
)
from pdfmarket.domains.catalog.services import CatalogService
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.purchases.services import PurchaseService
from pdfmarket.domains.repositories import FileStorage, UnitOfWork

router = APIRouter(prefix="/pdfs", tags=["pdfs"])


def _catalog_service(uow: UnitOfWork, storage: FileStorage) -> CatalogService:
    return CatalogService(uow, storage, upload_reward_points=settings.upload_reward_points)


@router.get("/", response_model=List[PdfSummary])
async def browse_pdfs(
    query: Optional[str] = Query(None, max_length=100),
    tag: Optional[str] = None,
    min_price_in_points: Optional[int] = Query(None, ge=0),
    max_price_in_points: Optional[int] = Query(None, ge=0),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Публичный каталог PDF"""
    catalog_service = _catalog_service(uow, storage)

    return await catalog_service.browse(PdfFilterRequest(
        query=query,
        tag=tag,
        min_price_in_points=min_price_in_points,
        max_price_in_points=max_price_in_points
    ))


@router.get("/mine", response_model=List[PdfDetails])
async def get_my_uploads(
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Загрузки текущего пользователя, включая неактивные"""
    catalog_service = _catalog_service(uow, storage)
    return await catalog_service.list_my_uploads(current_user.id)


@router.get("/{pdf_id}", response_model=PdfDetails)
async def get_pdf(
    pdf_id: str,
    current_user: Optional[Account] = Depends(get_optional_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Детали PDF"""
    catalog_service = _catalog_service(uow, storage)

    details = await catalog_service.get_details(pdf_id, viewer_id=current_user.id if current_user else None)
    if details is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF not found")

    return details


@router.post("/", response_model=UploadPdfResponse, status_code=status.HTTP_201_CREATED)
async def upload_pdf(
    title: str = Form(...),
    description: str = Form(""),
    price_in_points: int = Form(...),
    tags: str = Form(""),
    file: UploadFile = File(...),
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Загрузка нового PDF"""
    try:
        # Теги приходят строкой через запятую
        metadata = UploadPdfRequest(
            title=title,
            description=description,
            price_in_points=price_in_points,
            tags=tags.split(",") if tags else []
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing PDF file.")

    if len(content) > settings.max_upload_size_bytes:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="PDF file is too large.")

    catalog_service = _catalog_service(uow, storage)

    try:
        return await catalog_service.upload(
            current_user.id,
            metadata,
            io.BytesIO(content),
            file.filename or DEFAULT_FILE_NAME
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.put("/{pdf_id}", response_model=PdfDetails)
async def update_pdf(
    pdf_id: str,
    update_data: UpdatePdfRequest,
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Обновление метаданных PDF загрузившим пользователем"""
    catalog_service = _catalog_service(uow, storage)

    updated = await catalog_service.update(current_user.id, pdf_id, update_data)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF not found")

    return updated


@router.delete("/{pdf_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_pdf(
    pdf_id: str,
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Скрытие PDF из каталога"""
    catalog_service = _catalog_service(uow, storage)

    if not await catalog_service.deactivate(current_user.id, pdf_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF not found")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{pdf_id}/download")
async def download_pdf(
    pdf_id: str,
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Скачивание PDF загрузившим пользователем или покупателем"""
    entitlement = EntitlementChecker(uow.documents, PurchaseService(uow))
    resolver = DownloadResolver(uow.documents, storage, entitlement)

    file_result = await resolver.resolve_download(current_user.id, pdf_id)
    if file_result is None:
        # Отсутствие документа и отсутствие права неразличимы
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF not found")

    return Response(
        content=file_result.content,
        media_type=file_result.content_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_result.file_name)}"
        }
    )

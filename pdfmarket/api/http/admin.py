from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pdfmarket.core.auth import require_admin
from pdfmarket.core.db import get_file_storage, get_uow
from pdfmarket.domains.admin.schemas import (
    AdminPdfListItem, PlatformStats, ResetPasswordRequest, UpdateUserRequest, UserSummary
)
from pdfmarket.domains.admin.services import AdminService
from pdfmarket.domains.repositories import FileStorage, UnitOfWork

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users", response_model=List[UserSummary])
async def get_users(
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Обзор пользователей"""
    return await AdminService(uow, storage).list_users()


@router.patch("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    user_id: str,
    update_data: UpdateUserRequest,
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Изменение email и баланса пользователя"""
    if not await AdminService(uow, storage).update_user(user_id, update_data):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/users/{user_id}/reset-password", status_code=status.HTTP_204_NO_CONTENT)
async def reset_password(
    user_id: str,
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Сброс пароля пользователя"""
    if not await AdminService(uow, storage).reset_user_password(user_id, request.new_password):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=PlatformStats)
async def get_stats(
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Статистика платформы"""
    return await AdminService(uow, storage).get_stats()


@router.get("/pdfs", response_model=List[AdminPdfListItem])
async def get_pdfs(
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Все PDF для модерации"""
    return await AdminService(uow, storage).list_documents()


@router.delete("/pdfs/{pdf_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pdf(
    pdf_id: str,
    uow: UnitOfWork = Depends(get_uow),
    storage: FileStorage = Depends(get_file_storage)
):
    """Удаление PDF вместе с файлом"""
    if not await AdminService(uow, storage).delete_document(pdf_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="PDF not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from pdfmarket.core.auth import get_current_user
from pdfmarket.core.db import get_uow
from pdfmarket.core.exceptions import BusinessRuleViolation, IntegrityFault, NotFoundError
from pdfmarket.domains.identity.entities import Account
from pdfmarket.domains.purchases.schemas import PurchaseRequest, PurchaseResponse, PurchasedPdf
from pdfmarket.domains.purchases.services import PurchaseService
from pdfmarket.domains.repositories import UnitOfWork

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post("/", response_model=PurchaseResponse)
async def purchase_pdf(
    request: PurchaseRequest,
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow)
):
    """Покупка PDF за баллы"""
    purchase_service = PurchaseService(uow)

    try:
        result = await purchase_service.purchase(current_user.id, request.pdf_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except BusinessRuleViolation as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except IntegrityFault:
        logger.exception(f"Purchase of {request.pdf_id} by {current_user.id} failed on integrity fault")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal consistency error"
        )

    return PurchaseResponse(
        purchase_id=result.purchase_id,
        pdf_id=result.document_id,
        buyer_user_id=result.buyer_id,
        purchased_at=result.purchased_at,
        price_in_points=result.price_in_points,
        buyer_points_balance=result.buyer_points_balance
    )


@router.get("/my", response_model=List[PurchasedPdf])
async def get_my_purchases(
    current_user: Account = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow)
):
    """Покупки текущего пользователя"""
    purchase_service = PurchaseService(uow)
    return await purchase_service.get_my_purchases(current_user.id)

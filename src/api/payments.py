"""Payment and payment intent routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import CurrentUser, get_current_user, get_payment_gateway, require_admin
from src.api.errors import raise_for_status
from src.api.schemas import PaymentCreate, PaymentIntentCreate
from src.db.session import get_db_session
from src.integrations.base import PaymentGateway, PaymentIntentError
from src.services.payment_service import PaymentService

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent")
async def create_payment_intent(
    payload: PaymentIntentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> dict[str, object]:
    service = PaymentService(session, gateway)
    try:
        return await service.create_payment_intent(
            payload.amount,
            email=current_user.email,
            property_id=payload.property_id,
        )
    except PaymentIntentError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e


@router.post("/payments", status_code=status.HTTP_201_CREATED)
async def record_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, object]:
    if payload.email is not None and payload.email != current_user.email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Payments can only be made on your own behalf",
        )

    result = await PaymentService(session).record_payment(
        property_id=payload.property_id,
        email=current_user.email,
        amount=payload.amount,
        transaction_id=payload.transaction_id,
        payment_method=payload.payment_method,
    )
    return raise_for_status(result)


@router.get("/payments")
async def list_my_payments(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await PaymentService(session).list_payments(email=current_user.email)


@router.get("/payments/all", dependencies=[Depends(require_admin)])
async def list_all_payments(
    session: AsyncSession = Depends(get_db_session),
) -> list[dict[str, object]]:
    return await PaymentService(session).list_payments()

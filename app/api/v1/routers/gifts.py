from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentUser, User
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.gifts import (
    CreateGiftIn,
    GiftEventOut,
    GiftOut,
    ListGiftEventsOut,
    ListGiftsOut,
    ListTransactionsOut,
    PurchaseGiftIn,
    TopUpWalletIn,
    TransactionOut,
    WalletOut,
)
from app.domain.gifts.gift_domain import GiftService
from app.domain.gifts.gift_models import GiftCreateParams, GiftEventDirection
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/gifts")

# Only backend services (payment callbacks, admin tooling) manage the catalog and credit wallets
SERVICE_ROLE = "service_role"

# Singleton instance
_gift_service = GiftService()


def get_gift_service() -> GiftService:
    """Get the singleton GiftService instance."""
    return _gift_service


def _ensure_service_role(user: User) -> None:
    if user.role != SERVICE_ROLE:
        raise AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="This action is restricted to backend services",
            status_code=HttpStatusCode.FORBIDDEN,
        )


@router.get("/list_gifts")
async def list_gifts(
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[ListGiftsOut]:
    """The gift catalog, cheapest first."""
    gifts = await service.list_gifts()

    return ApiOut[ListGiftsOut](results=ListGiftsOut(gifts=[GiftOut(**g.model_dump()) for g in gifts]))


@router.post("/create_gift")
async def create_gift(
    payload: CreateGiftIn,
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[GiftOut]:
    _ensure_service_role(user)
    gift = await service.create_gift(GiftCreateParams(**payload.model_dump()))

    return ApiOut[GiftOut](results=GiftOut(**gift.model_dump()))


@router.get("/get_wallet")
async def get_wallet(
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[WalletOut]:
    """The authenticated user's wallet, opened on first access."""
    wallet = await service.get_wallet(user.user_id)

    return ApiOut[WalletOut](results=WalletOut(**wallet.model_dump()))


@router.post("/top_up_wallet")
async def top_up_wallet(
    payload: TopUpWalletIn,
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[WalletOut]:
    """Credit a settled payment. Called by the payment backend, never by clients."""
    _ensure_service_role(user)
    wallet = await service.top_up_wallet(payload.user_id, payload.amount, payload.payment_method)

    return ApiOut[WalletOut](results=WalletOut(**wallet.model_dump()))


@router.get("/list_transactions")
async def list_transactions(
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[ListTransactionsOut]:
    transactions = await service.get_transactions(user.user_id)

    return ApiOut[ListTransactionsOut](
        results=ListTransactionsOut(transactions=[TransactionOut(**t.model_dump()) for t in transactions])
    )


@router.post("/purchase_gift")
async def purchase_gift(
    payload: PurchaseGiftIn,
    user: CurrentUser,
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[GiftEventOut]:
    """Send a gift paid from the authenticated user's wallet."""
    event = await service.purchase_gift(payload.gift_id, sender_id=user.user_id, receiver_id=payload.receiver_id)

    return ApiOut[GiftEventOut](results=GiftEventOut(**event.model_dump()))


@router.get("/list_gift_events")
async def list_gift_events(
    user: CurrentUser,
    direction: GiftEventDirection = Query(GiftEventDirection.RECEIVED, description="sent or received"),
    service: GiftService = Depends(get_gift_service),
) -> ApiOut[ListGiftEventsOut]:
    events = await service.get_gift_events(user.user_id, direction)

    return ApiOut[ListGiftEventsOut](
        results=ListGiftEventsOut(direction=direction, events=[GiftEventOut(**e.model_dump()) for e in events])
    )

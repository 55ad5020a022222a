"""Gift domain service - catalog, wallets and gift purchases."""

from beanie.operators import In, Inc, Set, SetOnInsert
from loguru import logger

from app.schemas import (
    Gift,
    GiftEvent,
    NotificationType,
    Transaction,
    TransactionStatus,
    TransactionType,
    Wallet,
)
from app.schemas.schema_utils import NEWEST_FIRST, utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..notifications.notification_domain import NotificationService
from ..notifications.notification_models import NotificationCreateParams
from ..utils.idgen import new_gift_event_id, new_gift_id, new_transaction_id
from ..utils.upsert import upsert_one
from .gift_models import (
    TRANSACTIONS_LIMIT,
    GiftCreateParams,
    GiftEventDirection,
    GiftEventResponse,
    GiftResponse,
    TransactionResponse,
    WalletResponse,
)


def _positive_amount(amount: int, what: str) -> None:
    if amount <= 0:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_PARAMS,
            errmesg=f"{what} must be a positive amount of SEK",
            status_code=HttpStatusCode.BAD_REQUEST,
        )


class GiftService:
    def __init__(self, notifications: NotificationService | None = None):
        self._notifications = notifications or NotificationService()

    # ==================== CATALOG ====================

    async def list_gifts(self) -> list[GiftResponse]:
        """The whole catalog, cheapest first."""
        gifts = await Gift.find_all().sort("+price_sek", "+_id").to_list()
        return [GiftResponse(**g.model_dump(exclude={"id"})) for g in gifts]

    async def get_gift(self, gift_id: str) -> GiftResponse:
        gift = await Gift.find_one(Gift.gift_id == gift_id)
        if gift is None:
            raise AppError(
                errcode=AppErrorCode.E_GIFT_NOT_FOUND,
                errmesg="Gift not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return GiftResponse(**gift.model_dump(exclude={"id"}))

    async def create_gift(self, params: GiftCreateParams) -> GiftResponse:
        _positive_amount(params.price_sek, "Gift price")

        gift = Gift(gift_id=new_gift_id(), **params.model_dump())
        await gift.insert()
        logger.info(f"Created gift {gift.gift_id} ({gift.name}) at {gift.price_sek} SEK")

        return GiftResponse(**gift.model_dump(exclude={"id"}))

    # ==================== WALLETS ====================

    async def get_wallet(self, user_id: str) -> WalletResponse:
        """The user's wallet, opened with a zero balance on first access."""
        now = utc_now()
        wallet = await upsert_one(
            Wallet,
            [Wallet.user_id == user_id],
            SetOnInsert({Wallet.balance: 0, Wallet.created_at: now, Wallet.last_updated: now}),
        )
        return WalletResponse(**wallet.model_dump(exclude={"id"}))

    async def top_up_wallet(self, user_id: str, amount: int, payment_method: str) -> WalletResponse:
        """Credit a settled payment to the wallet and record it."""
        _positive_amount(amount, "Top-up")

        now = utc_now()
        wallet = await upsert_one(
            Wallet,
            [Wallet.user_id == user_id],
            Inc({Wallet.balance: amount}),
            Set({Wallet.last_updated: now}),
            SetOnInsert({Wallet.created_at: now}),
        )
        await Transaction(
            transaction_id=new_transaction_id(),
            user_id=user_id,
            amount=amount,
            type=TransactionType.WALLET_TOPUP,
            payment_method=payment_method,
            source=TransactionType.WALLET_TOPUP.value,
            status=TransactionStatus.PAID,
        ).insert()

        logger.info(f"Topped up wallet of user {user_id} with {amount} SEK via {payment_method}")
        return WalletResponse(**wallet.model_dump(exclude={"id"}))

    async def get_transactions(self, user_id: str, limit: int = TRANSACTIONS_LIMIT) -> list[TransactionResponse]:
        transactions = (
            await Transaction.find(Transaction.user_id == user_id)
            .sort(NEWEST_FIRST)  # type: ignore
            .limit(limit)
            .to_list()
        )
        return [TransactionResponse(**t.model_dump(exclude={"id"})) for t in transactions]

    async def _change_balance(self, user_id: str, delta: int, minimum: int | None = None) -> bool:
        """Add `delta` to the balance in one update, only if it is at least `minimum`."""
        conditions = [Wallet.user_id == user_id]
        if minimum is not None:
            conditions.append(Wallet.balance >= minimum)

        result = await Wallet.find_one(*conditions).update(
            Inc({Wallet.balance: delta}),
            Set({Wallet.last_updated: utc_now()}),
        )
        return bool(result and result.modified_count)

    # ==================== PURCHASES ====================

    async def purchase_gift(self, gift_id: str, sender_id: str, receiver_id: str) -> GiftEventResponse:
        """Pay for a gift from the sender's wallet and deliver it to the receiver.

        The balance check and the debit are a single conditional update, so
        concurrent purchases can never overdraw the wallet.
        """
        gift = await self.get_gift(gift_id)
        price = gift.price_sek

        if await Wallet.find_one(Wallet.user_id == sender_id) is None:
            raise AppError(
                errcode=AppErrorCode.E_WALLET_NOT_FOUND,
                errmesg="Wallet not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if not await self._change_balance(sender_id, -price, minimum=price):
            raise AppError(
                errcode=AppErrorCode.E_INSUFFICIENT_BALANCE,
                errmesg="Insufficient balance",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        try:
            await Transaction(
                transaction_id=new_transaction_id(),
                user_id=sender_id,
                amount=-price,
                type=TransactionType.GIFT_PURCHASE,
                payment_method="wallet",
                source=TransactionType.GIFT_PURCHASE.value,
                status=TransactionStatus.COMPLETED,
            ).insert()
        except Exception as e:
            logger.exception(f"Failed to record gift purchase of user {sender_id}, refunding {price} SEK")
            await self._change_balance(sender_id, price)
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="Failed to create transaction",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            ) from e

        event = GiftEvent(
            gift_event_id=new_gift_event_id(),
            sender_user_id=sender_id,
            receiver_user_id=receiver_id,
            gift_id=gift_id,
            price_sek=price,
        )
        await event.insert()
        logger.info(f"User {sender_id} sent gift {gift_id} to {receiver_id} for {price} SEK")

        await self._notifications.create_notification(
            NotificationCreateParams(
                type=NotificationType.GIFT_RECEIVED,
                sender_id=sender_id,
                receiver_id=receiver_id,
                message=f"sent you a {gift.name}",
            )
        )

        return GiftEventResponse(**event.model_dump(exclude={"id"}), gift=gift)

    async def get_gift_events(self, user_id: str, direction: GiftEventDirection) -> list[GiftEventResponse]:
        """Gifts the user sent or received, newest first, with their catalog item."""
        if direction == GiftEventDirection.SENT:
            query = GiftEvent.find(GiftEvent.sender_user_id == user_id)
        else:
            query = GiftEvent.find(GiftEvent.receiver_user_id == user_id)
        events = await query.sort(NEWEST_FIRST).to_list()  # type: ignore

        gift_ids = list({e.gift_id for e in events})
        gifts = {g.gift_id: g for g in await Gift.find(In(Gift.gift_id, gift_ids)).to_list()} if gift_ids else {}

        return [
            GiftEventResponse(
                **e.model_dump(exclude={"id"}),
                gift=GiftResponse(**gifts[e.gift_id].model_dump(exclude={"id"})) if e.gift_id in gifts else None,
            )
            for e in events
        ]

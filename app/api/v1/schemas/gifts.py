from pydantic import BaseModel, Field

from app.domain.gifts.gift_models import GiftEventDirection
from app.schemas import TransactionStatus, TransactionType

from .serializers import UtcDateTime


class GiftOut(BaseModel):
    gift_id: str
    name: str
    description: str
    price_sek: int
    icon_url: str | None = None
    animation_url: str | None = None
    created_at: UtcDateTime


class WalletOut(BaseModel):
    user_id: str
    balance: int
    last_updated: UtcDateTime


class TransactionOut(BaseModel):
    transaction_id: str
    amount: int
    type: TransactionType
    payment_method: str
    source: str
    status: TransactionStatus
    created_at: UtcDateTime


class GiftEventOut(BaseModel):
    gift_event_id: str
    sender_user_id: str
    receiver_user_id: str
    gift_id: str
    price_sek: int
    created_at: UtcDateTime
    gift: GiftOut | None = None


class ListGiftsOut(BaseModel):
    gifts: list[GiftOut]


class ListTransactionsOut(BaseModel):
    transactions: list[TransactionOut]


class ListGiftEventsOut(BaseModel):
    direction: GiftEventDirection
    events: list[GiftEventOut]


class CreateGiftIn(BaseModel):
    name: str = Field(min_length=1, description="Name shown in the gift picker")
    price_sek: int = Field(gt=0, description="Price in whole SEK")
    description: str = ""
    icon_url: str | None = None
    animation_url: str | None = None


class TopUpWalletIn(BaseModel):
    user_id: str = Field(description="Wallet owner")
    amount: int = Field(gt=0, description="Amount in whole SEK")
    payment_method: str = Field(description="How the top-up was paid, e.g. swish or card")


class PurchaseGiftIn(BaseModel):
    gift_id: str
    receiver_id: str = Field(description="User receiving the gift, usually the streamer")

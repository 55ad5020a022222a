"""Gift and wallet domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from app.schemas import TransactionStatus, TransactionType

TRANSACTIONS_LIMIT = 50


class GiftEventDirection(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


class GiftResponse(BaseModel):
    gift_id: str
    name: str
    description: str
    price_sek: int
    icon_url: str | None = None
    animation_url: str | None = None
    created_at: datetime


class GiftCreateParams(BaseModel):
    name: str
    price_sek: int
    description: str = ""
    icon_url: str | None = None
    animation_url: str | None = None


class WalletResponse(BaseModel):
    user_id: str
    balance: int
    last_updated: datetime


class TransactionResponse(BaseModel):
    transaction_id: str
    user_id: str
    amount: int
    type: TransactionType
    payment_method: str
    source: str
    status: TransactionStatus
    created_at: datetime


class GiftEventResponse(BaseModel):
    gift_event_id: str
    sender_user_id: str
    receiver_user_id: str
    gift_id: str
    price_sek: int
    created_at: datetime
    gift: GiftResponse | None = None

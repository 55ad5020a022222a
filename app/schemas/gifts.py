"""Virtual gifts and wallet ODM schemas.

Amounts are whole Swedish kronor.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class TransactionType(str, Enum):
    GIFT_PURCHASE = "gift_purchase"
    WALLET_TOPUP = "wallet_topup"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PAID = "paid"


class Gift(Document):
    """An item of the gift catalog."""

    gift_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    name: str
    description: str = ""
    price_sek: int
    icon_url: str | None = None
    animation_url: str | None = None

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "gifts"
        indexes = [
            IndexModel([("price_sek", ASCENDING)], name="idx_price"),
        ]


class Wallet(Document):
    """Spendable balance of one user."""

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    balance: int = 0

    created_at: datetime = Field(default_factory=utc_now)
    last_updated: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "last_updated", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "wallets"


class Transaction(Document):
    """A movement on a wallet; negative amounts are spending."""

    transaction_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: str
    amount: int
    type: TransactionType
    payment_method: str
    source: str
    status: TransactionStatus

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "transactions"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)], name="idx_user_created"),
        ]


class GiftEvent(Document):
    """A gift sent from one user to another."""

    gift_event_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    sender_user_id: str
    receiver_user_id: str
    gift_id: str
    price_sek: int

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "gift_events"
        indexes = [
            IndexModel([("sender_user_id", ASCENDING), ("created_at", DESCENDING)], name="idx_sender_created"),
            IndexModel(
                [("receiver_user_id", ASCENDING), ("created_at", DESCENDING)],
                name="idx_receiver_created",
            ),
        ]

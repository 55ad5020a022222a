from typing import Any, TypeVar

from beanie import Document
from beanie.odm.queries.update import UpdateResponse
from loguru import logger
from pymongo.errors import DuplicateKeyError

DocT = TypeVar("DocT", bound=Document)

UPSERT_ATTEMPTS = 3


async def upsert_one(model: type[DocT], filters: list[Any], *updates: Any) -> DocT:
    """Apply `updates` to the document matching `filters`, inserting it when missing.

    Runs as a single findAndModify with upsert, keyed by a unique index. Two
    concurrent first writes can still collide on that index; the loser is
    retried and then matches the winner's document.
    """
    attempt = 1
    while True:
        try:
            return await model.find_one(*filters).update(  # type: ignore[return-value]
                *updates,
                upsert=True,
                response_type=UpdateResponse.NEW_DOCUMENT,
            )
        except DuplicateKeyError:
            if attempt >= UPSERT_ATTEMPTS:
                raise
            logger.debug(f"Concurrent insert into {model.__name__}, retrying upsert (attempt {attempt})")
            attempt += 1

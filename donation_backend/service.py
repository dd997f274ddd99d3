import logging
import math
import re
from typing import Any, List, Optional

from fastapi import UploadFile

from donation_backend.errors import InvalidAmountError, RecipientNotFound
from donation_backend.files import PhotoStore
from donation_backend.models import RecipientCreate, RecipientDB, utcnow
from donation_backend.store import RecipientStore

logger = logging.getLogger(__name__)

LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def parse_amount(value: Any) -> int:
    """Read a donation amount as an integer.

    Numbers are truncated toward zero and strings contribute their leading
    run of digits, so ``"12.9"`` gives 12. Anything without an integer part
    raises ``InvalidAmountError``.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid donation amount: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmountError(f"Invalid donation amount: {value!r}")
        return int(value)
    if isinstance(value, str):
        match = LEADING_INTEGER.match(value)
        if match:
            return int(match.group(1))
    raise InvalidAmountError(f"Invalid donation amount: {value!r}")


class RecipientService:
    def __init__(self, store: RecipientStore, photos: PhotoStore):
        self.store = store
        self.photos = photos

    def list_recipients(self) -> List[RecipientDB]:
        return self.store.list()

    def get_recipient(self, recipient_id: str) -> RecipientDB:
        recipient = self.store.get(recipient_id)
        if recipient is None:
            raise RecipientNotFound(recipient_id)
        return recipient

    def create_recipient(self, data: RecipientCreate, photo: Optional[UploadFile] = None) -> RecipientDB:
        recipient = RecipientDB(**data.model_dump(), receivedAmount=0)
        if photo is not None and photo.filename:
            recipient.photo = self.photos.save(photo.filename, photo.file)
        recipient = self.store.save(recipient)
        logger.info(f"Created recipient {recipient.id}")
        return recipient

    def donate(self, recipient_id: str, amount: Any) -> RecipientDB:
        # No lock between the read and the write: concurrent donations
        # to one recipient can overwrite each other.
        recipient = self.get_recipient(recipient_id)
        donation = parse_amount(amount)
        recipient.receivedAmount += donation
        recipient.updatedAt = utcnow()
        recipient = self.store.save(recipient)
        logger.info(f"Donation of {donation} to {recipient_id}, received now {recipient.receivedAmount}")
        return recipient

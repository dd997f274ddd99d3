import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator
from sqlmodel import SQLModel, Field as ORMField


def new_identifier() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Recipient record as persisted in the store
class RecipientDB(SQLModel, table=True):
    __tablename__ = "recipients"

    id: str = ORMField(default_factory=new_identifier, primary_key=True, max_length=32)
    name: Optional[str] = None
    address: Optional[str] = None
    reason: Optional[str] = None
    contactNumber: Optional[str] = None
    bankAccount: Optional[str] = None
    ifsc: Optional[str] = None
    targetAmount: Optional[float] = None
    receivedAmount: int = 0
    photo: Optional[str] = None
    createdAt: datetime = ORMField(default_factory=utcnow)
    updatedAt: datetime = ORMField(default_factory=utcnow)


# Fields accepted when creating a recipient; anything else is ignored
class RecipientCreate(BaseModel):
    name: Optional[str] = Field(None, examples=["Asha Devi"])
    address: Optional[str] = Field(None, examples=["12 Lake Road, Pune"])
    reason: Optional[str] = Field(None, examples=["Surgery costs"])
    contactNumber: Optional[str] = Field(None, examples=["9876543210"])
    bankAccount: Optional[str] = Field(None, examples=["001234567890"])
    ifsc: Optional[str] = Field(None, examples=["SBIN0001234"])
    targetAmount: Optional[float] = Field(None, allow_inf_nan=False, examples=[50000])

    @field_validator("targetAmount", mode="before")
    @classmethod
    def blank_target_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# Body of PUT /recipients/{id}/donate
class Donation(BaseModel):
    # Raw JSON value; parse_amount decides what counts as a number
    amount: Any = Field(None, examples=[250])

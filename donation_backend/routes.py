import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile
from pydantic import ValidationError

from donation_backend.dependencies import get_service
from donation_backend.errors import InvalidAmountError, RecipientError, RecipientNotFound
from donation_backend.models import Donation, RecipientCreate, RecipientDB
from donation_backend.service import RecipientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipients", tags=["recipients"])


# GET endpoint to list all recipients
@router.get("", response_model=List[RecipientDB])
def list_recipients(service: RecipientService = Depends(get_service)):
    try:
        return service.list_recipients()
    except RecipientError as exc:
        logger.error(f"Error fetching recipients: {exc}")
        raise HTTPException(status_code=500, detail="Error fetching recipients")


@router.get("/{recipient_id}", response_model=RecipientDB)
def get_recipient(recipient_id: str, service: RecipientService = Depends(get_service)):
    try:
        return service.get_recipient(recipient_id)
    except RecipientNotFound:
        raise HTTPException(status_code=404, detail="Recipient not found")
    except RecipientError as exc:
        logger.error(f"Error fetching recipient {recipient_id}: {exc}")
        raise HTTPException(status_code=500, detail="Error fetching recipient")


@router.post("", response_model=RecipientDB, status_code=201)
def create_recipient(
    name: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    reason: Optional[str] = Form(None),
    contactNumber: Optional[str] = Form(None),
    bankAccount: Optional[str] = Form(None),
    ifsc: Optional[str] = Form(None),
    targetAmount: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    service: RecipientService = Depends(get_service),
):
    """
    Creates a recipient from multipart form fields, storing the optional photo upload.
    """
    try:
        data = RecipientCreate(
            name=name,
            address=address,
            reason=reason,
            contactNumber=contactNumber,
            bankAccount=bankAccount,
            ifsc=ifsc,
            targetAmount=targetAmount,
        )
        return service.create_recipient(data, photo)
    except (ValidationError, RecipientError) as exc:
        logger.error(f"Error creating recipient: {exc}")
        raise HTTPException(status_code=500, detail="Error creating recipient")


@router.put("/{recipient_id}/donate", response_model=RecipientDB)
def donate(recipient_id: str, donation: Donation = Body(...), service: RecipientService = Depends(get_service)):
    """
    Adds the donated amount to the recipient's received total.
    """
    try:
        return service.donate(recipient_id, donation.amount)
    except RecipientNotFound:
        raise HTTPException(status_code=404, detail="Recipient not found")
    except InvalidAmountError as exc:
        logger.info(f"Rejected donation to {recipient_id}: {exc}")
        raise HTTPException(status_code=400, detail="Invalid donation amount")
    except RecipientError as exc:
        logger.error(f"Error processing donation: {exc}")
        raise HTTPException(status_code=500, detail="Error processing donation")

from fastapi import Request

from donation_backend.service import RecipientService


def get_service(request: Request) -> RecipientService:
    return request.app.state.recipient_service

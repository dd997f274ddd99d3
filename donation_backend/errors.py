class RecipientError(Exception):
    """Base class for failures raised by the recipient service."""


class RecipientNotFound(RecipientError):
    def __init__(self, recipient_id: str):
        super().__init__(f"Recipient {recipient_id} not found")
        self.recipient_id = recipient_id


class StoreError(RecipientError):
    """The record store or the upload directory could not complete a call."""


class InvalidAmountError(RecipientError, ValueError):
    pass

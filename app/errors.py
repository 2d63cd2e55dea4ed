# app/errors.py


class NotFoundError(LookupError):
    """Raised by the store when an id does not match any record."""

    kind = "Record"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"{self.kind} {record_id!r} not found")


class InvoiceNotFound(NotFoundError):
    kind = "Invoice"


class RMNotFound(NotFoundError):
    kind = "Relationship manager"

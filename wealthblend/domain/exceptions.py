"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """A field value violates a declared constraint"""

    def __init__(self, field: str, constraint: str):
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field}: {constraint}")


class NotFoundError(DomainException):
    """Requested record does not exist (or belongs to another user)"""

    def __init__(self, record_type: str, record_id: str):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type} {record_id} not found")


class StoreUnavailableError(DomainException):
    """Persistence layer is unreachable"""

    pass


class AlertDeliveryError(DomainException):
    """Alert webhook could not be delivered after all retries"""

    pass

"""
Domain exceptions.

All FundTracker errors inherit from FundTrackerError so the API layer can
translate them in one place.
"""


class FundTrackerError(Exception):
    """Base exception for all FundTracker errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidReference(FundTrackerError):
    """Raised when a fund or user id does not exist."""

    def __init__(self, entity: str, entity_id, code: str = "INVALID_REFERENCE"):
        super().__init__(f"{entity} not found: {entity_id}", code)
        self.entity = entity
        self.entity_id = entity_id


class InvalidAmount(FundTrackerError):
    """Raised for non-positive amounts, units or NAVs."""

    def __init__(self, message: str, field: str = None, code: str = "INVALID_AMOUNT"):
        super().__init__(message, code)
        self.field = field


class InsufficientUnits(FundTrackerError):
    """Raised when a sell exceeds the units currently held."""

    def __init__(self, fund_id: int, requested, available, code: str = "INSUFFICIENT_UNITS"):
        super().__init__(
            f"Cannot sell {requested} units of fund {fund_id}: only {available} held",
            code,
        )
        self.fund_id = fund_id
        self.requested = requested
        self.available = available


class DuplicateUser(FundTrackerError):
    """Raised when registering an e-mail that already exists."""

    def __init__(self, email: str, code: str = "DUPLICATE_USER"):
        super().__init__("User with this email already exists", code)
        self.email = email


class NotFound(FundTrackerError):
    """Raised when a lookup by id misses."""

    def __init__(self, entity: str, entity_id, code: str = "NOT_FOUND"):
        super().__init__(f"{entity} not found: {entity_id}", code)
        self.entity = entity
        self.entity_id = entity_id

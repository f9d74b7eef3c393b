"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Caller supplied a record outside the documented input domain"""

    pass


class AllocationStateError(DomainException):
    """Allocation proposal is not in a state that allows the requested transition"""

    pass


class LedgerSyncError(DomainException):
    """Ledger sync endpoint rejected or never acknowledged an event"""

    pass

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException, ValueError):
    """Schedule request or record data is malformed or out of range"""

    pass


class RecordNotFoundError(DomainException):
    """Requested record does not exist or belongs to another user"""

    pass


class DuplicateRecordError(DomainException):
    """A record with the same unique key already exists"""

    pass

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BudgetNotFoundError(DomainException):
    """Requested saved budget does not exist"""

    pass


class AdvisorAPIError(DomainException):
    """Language model API returned an error or is unavailable"""

    pass


class AdvisorNotConfiguredError(AdvisorAPIError):
    """No API key configured for the language model"""

    pass


class PersistenceError(DomainException):
    """Writing to or reading from the database failed"""

    pass

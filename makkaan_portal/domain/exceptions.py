"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ContractNotFoundError(DomainException):
    """No contract exists for the given identifier"""

    pass


class LedgerRowNotFoundError(DomainException):
    """No installment row exists for the given identifier"""

    pass


class ChildPaymentNotFoundError(DomainException):
    """No child payment exists for the given identifier"""

    pass


class DuplicateEmailError(DomainException):
    """A user with this email is already registered"""

    pass

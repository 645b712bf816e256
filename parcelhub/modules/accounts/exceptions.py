"""Account domain specific exceptions."""

from parcelhub.modules.common.exceptions import DomainError, NotFound


class AccountError(DomainError):
    """Base class for account domain errors."""

    code = "account_error"


class AccountAlreadyExistsError(AccountError):
    """Raised when attempting to create an account with duplicate username."""

    code = "account_exists"


class AccountNotFoundError(NotFound):
    """Raised when the requested account cannot be found."""

    def __init__(self, identifier: str) -> None:
        super().__init__("account", identifier)

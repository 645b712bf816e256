"""Package domain specific exceptions."""

from parcelhub.modules.common.exceptions import DomainError


class TrackingNumberTakenError(DomainError):
    """Raised when a supplied tracking number is already in use."""

    code = "tracking_number_taken"


class OrderNotShippableError(DomainError):
    """Raised when a package cannot be linked to the given order."""

    code = "order_not_shippable"

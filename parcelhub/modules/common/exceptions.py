"""Error taxonomy shared by the ledger, lifecycle and coordinator modules."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by the core."""

    code = "domain_error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        super().__init__(self.message)


class Forbidden(DomainError):
    """The acting account lacks the capability for this operation."""

    code = "forbidden"


class IllegalTransition(DomainError):
    """Requested status change is not reachable from the current status."""

    code = "illegal_transition"

    def __init__(self, source: str, target: str, message: str | None = None) -> None:
        self.source = source
        self.target = target
        super().__init__(message or f"illegal transition {source} -> {target}")


class InvalidAmount(DomainError):
    """Monetary value is non-positive or malformed."""

    code = "invalid_amount"


class PaymentFailed(DomainError):
    """A ledger debit could not be applied."""

    code = "payment_failed"


class InsufficientFunds(PaymentFailed):
    """Wallet balance cannot cover the debit."""

    code = "insufficient_funds"

    def __init__(self, balance_cents: int, requested_cents: int) -> None:
        self.balance_cents = balance_cents
        self.requested_cents = requested_cents
        super().__init__(
            f"insufficient funds: balance {balance_cents}, requested {requested_cents}"
        )


class CustomsUnpaid(DomainError):
    """Package cannot move on while its customs fee is outstanding."""

    code = "customs_unpaid"

    def __init__(self, fee_cents: int, paid_cents: int) -> None:
        self.fee_cents = fee_cents
        self.paid_cents = paid_cents
        super().__init__(f"customs fee outstanding: fee {fee_cents}, paid {paid_cents}")


class NotFound(DomainError):
    """Referenced account, order, package or wallet does not exist."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class ConcurrentModification(DomainError):
    """Optimistic version check lost the race; the caller may retry."""

    code = "concurrent_modification"
    retryable = True


__all__ = [
    "DomainError",
    "Forbidden",
    "IllegalTransition",
    "InvalidAmount",
    "PaymentFailed",
    "InsufficientFunds",
    "CustomsUnpaid",
    "NotFound",
    "ConcurrentModification",
]

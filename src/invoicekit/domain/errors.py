"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for CLI error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Operation conflicts with the current state of an entity."""


class InvalidInput(ValidationError):
    """Negative monetary quantity or otherwise unusable invoice input."""


class MissingPaymentMethod(ValidationError):
    """Payment completion attempted without an active payment method."""


class InvoiceLocked(ConflictError):
    """A paid invoice cannot have its line items, tax or deposit changed."""


class InvalidTransition(ConflictError):
    """The requested lifecycle action is not legal from the current state."""


class ConcurrentModification(ConflictError):
    """Another writer transitioned the invoice first."""


class TemplateNotFound(NotFoundError):
    """No stored message exists for a category and channel."""


class MigrationFailure(DomainError):
    """A legacy template could not be rewritten or persisted.

    Reads log it as a warning and serve the un-migrated content; the batch
    migration lets it propagate.
    """


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def payment_method_not_found(method_id: int) -> str:
    """Return message for missing payment method."""
    return f"Payment method {method_id} not found"


def message_not_found(message_id: int) -> str:
    """Return message for missing predefined message."""
    return f"Message {message_id} not found"


def negative_amount(field: str, value) -> str:
    """Return message for a negative monetary input."""
    return f"{field} cannot be negative (got {value})"


def illegal_transition(invoice_id: int, action: str, state: str) -> str:
    """Return message for an action that is not allowed in the current state."""
    return f"Cannot {action} invoice {invoice_id}: invoice is {state}"


def invoice_locked(invoice_id: int) -> str:
    """Return message when editing a paid invoice."""
    return (
        f"Invoice {invoice_id} is paid and cannot be edited. "
        "Revert the payment first."
    )

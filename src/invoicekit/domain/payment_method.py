"""Payment method domain service."""

from typing import Optional

from invoicekit.database.base import Database
from invoicekit.domain.entities import PaymentMethod
from invoicekit.domain.errors import (
    NotFoundError,
    ValidationError,
    payment_method_not_found,
)


class PaymentMethodService:
    """Service for managing payment methods."""

    def __init__(self, db: Database):
        """Initialize payment method service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_method(
        self,
        name: str,
        link: Optional[str] = None,
        instructions: Optional[str] = None,
        active: bool = True,
    ) -> int:
        """Create a payment method at the end of the display order.

        Args:
            name: Display name
            link: Optional external payment link
            instructions: Optional free-text payment instructions
            active: Whether the method is offered for selection

        Returns:
            Payment method ID

        Raises:
            ValidationError: If the name is empty or already used
        """
        name = self._validate_name(name)
        existing = self.db.list_payment_methods()
        for method in existing:
            if method.name == name:
                raise ValidationError(f"Payment method with name '{name}' already exists")

        display_order = max((m.display_order for m in existing), default=-1) + 1
        return self.db.create_payment_method(
            name=name,
            link=_clean(link),
            instructions=_clean(instructions),
            active=active,
            display_order=display_order,
        )

    def get_method(self, method_id: int) -> Optional[PaymentMethod]:
        """Get payment method by ID.

        Returns:
            PaymentMethod entity or None if not found
        """
        return self.db.get_payment_method(method_id)

    def require_method(self, method_id: int) -> PaymentMethod:
        method = self.db.get_payment_method(method_id)
        if method is None:
            raise NotFoundError(payment_method_not_found(method_id))
        return method

    def list_methods(self, active_only: bool = False) -> list[PaymentMethod]:
        """List payment methods in display order.

        Args:
            active_only: Only return methods offered for selection
        """
        return self.db.list_payment_methods(active_only=active_only)

    def update_method(
        self,
        method_id: int,
        name: Optional[str] = None,
        link: Optional[str] = None,
        instructions: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> PaymentMethod:
        """Update payment method fields.

        None leaves a field unchanged; an empty link or instructions string
        clears it.

        Raises:
            NotFoundError: If the method doesn't exist
            ValidationError: If the new name is empty or already used
        """
        self.require_method(method_id)
        if name is not None:
            name = self._validate_name(name)
            for method in self.db.list_payment_methods():
                if method.id != method_id and method.name == name:
                    raise ValidationError(f"Payment method with name '{name}' already exists")

        self.db.update_payment_method(
            method_id=method_id,
            name=name,
            link=_clean(link),
            instructions=_clean(instructions),
            active=active,
            clear_link=link is not None and _clean(link) is None,
            clear_instructions=instructions is not None and _clean(instructions) is None,
        )
        return self.require_method(method_id)

    def delete_method(self, method_id: int) -> None:
        """Delete a payment method.

        Paid invoices that referenced it keep their paid status but lose the
        method reference.
        """
        self.require_method(method_id)
        self.db.delete_payment_method(method_id)

    def reorder_methods(self, method_ids: list[int]) -> list[PaymentMethod]:
        """Set the display order to the given sequence of IDs.

        Raises:
            ValidationError: If the IDs are not exactly the existing methods
        """
        existing = {m.id for m in self.db.list_payment_methods()}
        if len(method_ids) != len(set(method_ids)) or set(method_ids) != existing:
            raise ValidationError("Reorder must list every payment method exactly once")
        for position, method_id in enumerate(method_ids):
            self.db.update_payment_method(method_id=method_id, display_order=position)
        return self.db.list_payment_methods()

    def _validate_name(self, name: str) -> str:
        if name is None or not name.strip():
            raise ValidationError("Payment method name is required")
        return name.strip()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None

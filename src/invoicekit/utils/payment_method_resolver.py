"""Utility for resolving payment method names to IDs."""

from invoicekit.domain.payment_method import PaymentMethodService


def resolve_payment_method(service: PaymentMethodService, method: str | int) -> int:
    """Resolve payment method name or ID to payment method ID.

    Args:
        service: PaymentMethodService instance
        method: Method name, or ID as int or numeric string

    Returns:
        Payment method ID

    Raises:
        ValueError: If the method is not found
    """
    if isinstance(method, int) or str(method).strip().isdigit():
        method_id = int(method)
        if service.get_method(method_id) is None:
            raise ValueError(f"Payment method ID {method_id} not found")
        return method_id

    for candidate in service.list_methods():
        if candidate.name == method:
            return candidate.id
    raise ValueError(f"Payment method '{method}' not found")

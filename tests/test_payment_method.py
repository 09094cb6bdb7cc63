"""Tests for PaymentMethodService."""

import pytest

from invoicekit.domain.errors import NotFoundError, ValidationError
from invoicekit.utils.payment_method_resolver import resolve_payment_method


class TestCreateMethod:
    """Test payment method creation."""

    def test_create(self, payment_method_service):
        method_id = payment_method_service.create_method(
            name="  Bank transfer ", instructions="IBAN ES00 0000"
        )
        method = payment_method_service.get_method(method_id)

        assert method.name == "Bank transfer"
        assert method.link is None
        assert method.instructions == "IBAN ES00 0000"
        assert method.active
        assert method.display_order == 0

    def test_display_order_appends(self, payment_method_service):
        payment_method_service.create_method(name="Card")
        second = payment_method_service.create_method(name="Cash")

        assert payment_method_service.get_method(second).display_order == 1

    def test_duplicate_name_rejected(self, payment_method_service, card_method):
        with pytest.raises(ValidationError, match="already exists"):
            payment_method_service.create_method(name="Card")

    def test_name_required(self, payment_method_service):
        with pytest.raises(ValidationError, match="name is required"):
            payment_method_service.create_method(name="   ")

    def test_blank_link_stored_as_none(self, payment_method_service):
        method_id = payment_method_service.create_method(name="Cash", link="  ")

        assert payment_method_service.get_method(method_id).link is None


class TestListAndUpdate:
    """Test listing, updating and reordering."""

    def test_active_only(self, payment_method_service, card_method):
        payment_method_service.create_method(name="Old", active=False)

        assert [m.name for m in payment_method_service.list_methods()] == ["Card", "Old"]
        assert [m.name for m in payment_method_service.list_methods(active_only=True)] == ["Card"]

    def test_update_fields(self, payment_method_service, card_method):
        updated = payment_method_service.update_method(
            card_method.id, name="Credit card", active=False
        )

        assert updated.name == "Credit card"
        assert not updated.active
        assert updated.link == card_method.link

    def test_empty_string_clears_link(self, payment_method_service, card_method):
        updated = payment_method_service.update_method(card_method.id, link="")

        assert updated.link is None
        assert updated.instructions == card_method.instructions

    def test_update_to_existing_name_rejected(self, payment_method_service, card_method):
        payment_method_service.create_method(name="Cash")

        with pytest.raises(ValidationError):
            payment_method_service.update_method(card_method.id, name="Cash")

    def test_update_missing(self, payment_method_service):
        with pytest.raises(NotFoundError):
            payment_method_service.update_method(99, name="x")

    def test_reorder(self, payment_method_service):
        a = payment_method_service.create_method(name="A")
        b = payment_method_service.create_method(name="B")
        c = payment_method_service.create_method(name="C")

        methods = payment_method_service.reorder_methods([c, a, b])

        assert [m.name for m in methods] == ["C", "A", "B"]

    def test_reorder_requires_every_method(self, payment_method_service):
        a = payment_method_service.create_method(name="A")
        payment_method_service.create_method(name="B")

        with pytest.raises(ValidationError, match="exactly once"):
            payment_method_service.reorder_methods([a])
        with pytest.raises(ValidationError):
            payment_method_service.reorder_methods([a, a])


class TestDeleteMethod:
    """Test deleting payment methods."""

    def test_delete(self, payment_method_service, card_method):
        payment_method_service.delete_method(card_method.id)

        assert payment_method_service.get_method(card_method.id) is None

    def test_delete_detaches_paid_invoices(
        self, payment_method_service, invoice_service, pending_invoice, card_method
    ):
        invoice_service.complete_payment(pending_invoice.id, card_method.id)

        payment_method_service.delete_method(card_method.id)

        invoice = invoice_service.get_invoice(pending_invoice.id)
        assert invoice.status.value == "paid"
        assert invoice.payment_method_id is None

    def test_delete_missing(self, payment_method_service):
        with pytest.raises(NotFoundError):
            payment_method_service.delete_method(5)


class TestResolvePaymentMethod:
    """Test resolving payment methods by name or ID."""

    def test_by_id(self, payment_method_service, card_method):
        assert resolve_payment_method(payment_method_service, card_method.id) == card_method.id
        assert resolve_payment_method(payment_method_service, str(card_method.id)) == card_method.id

    def test_by_name(self, payment_method_service, card_method):
        assert resolve_payment_method(payment_method_service, "Card") == card_method.id

    def test_not_found(self, payment_method_service):
        with pytest.raises(ValueError, match="'Cheque' not found"):
            resolve_payment_method(payment_method_service, "Cheque")
        with pytest.raises(ValueError, match="ID 7 not found"):
            resolve_payment_method(payment_method_service, 7)

"""Tests for payment method commands."""

from invoicekit.cli.main import cli


def invoke(cli_runner, temp_db, *args, input=None):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)


def test_add_and_list(cli_runner, temp_db):
    result = invoke(
        cli_runner, temp_db, "payment-method", "add", "Card", "--link", "https://pay.example.com/studio"
    )
    assert result.exit_code == 0, result.output
    assert "Created payment method 'Card' (ID: 1)" in result.output

    result = invoke(cli_runner, temp_db, "payment-method", "list")
    assert result.exit_code == 0, result.output
    assert "Card" in result.output
    assert "https://pay.example.com/studio" in result.output


def test_add_duplicate(cli_runner, temp_db, card_method):
    result = invoke(cli_runner, temp_db, "payment-method", "add", "Card")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_list_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "payment-method", "list")

    assert "No payment methods found." in result.output


def test_update_by_name(cli_runner, temp_db, card_method):
    result = invoke(cli_runner, temp_db, "payment-method", "update", "Card", "--inactive", "--link", "")

    assert result.exit_code == 0, result.output
    temp_db.disconnect()
    method = temp_db.get_payment_method(card_method.id)
    assert not method.active
    assert method.link is None


def test_delete_with_confirmation(cli_runner, temp_db, card_method):
    result = invoke(cli_runner, temp_db, "payment-method", "delete", "Card", input="y\n")

    assert result.exit_code == 0, result.output
    assert "Deleted payment method 'Card'" in result.output
    temp_db.disconnect()
    assert temp_db.get_payment_method(card_method.id) is None


def test_reorder(cli_runner, temp_db, payment_method_service):
    a = payment_method_service.create_method(name="A")
    b = payment_method_service.create_method(name="B")

    result = invoke(cli_runner, temp_db, "payment-method", "reorder", str(b), str(a))

    assert result.exit_code == 0, result.output
    assert "New order: B, A" in result.output


def test_reorder_incomplete(cli_runner, temp_db, payment_method_service):
    a = payment_method_service.create_method(name="A")
    payment_method_service.create_method(name="B")

    result = invoke(cli_runner, temp_db, "payment-method", "reorder", str(a))

    assert result.exit_code == 1
    assert "exactly once" in result.output

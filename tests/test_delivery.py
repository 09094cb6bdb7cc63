"""Tests for delivery launcher URLs."""

from urllib.parse import parse_qs, urlparse

import pytest

from invoicekit.domain.delivery import (
    build_chat_url,
    build_mailto_url,
    build_public_invoice_url,
    email_subject,
)


def test_public_invoice_url():
    assert build_public_invoice_url("https://app.example.com/", 12) == (
        "https://app.example.com/api/invoices/12/pdf/public"
    )


def test_chat_url_keeps_only_phone_digits():
    url = build_chat_url("+1 (555) 010-2030", "Invoice #1001\nTotal: $117.70")

    assert url.startswith("https://wa.me/15550102030?text=")
    assert parse_qs(urlparse(url).query)["text"] == ["Invoice #1001\nTotal: $117.70"]


def test_chat_url_requires_digits():
    with pytest.raises(ValueError, match="no digits"):
        build_chat_url("n/a", "hello")


def test_mailto_url():
    url = build_mailto_url("ana@example.com", "Invoice #1001 from Studio", "Pay & enjoy 🔗")
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert parsed.scheme == "mailto"
    assert parsed.path == "ana@example.com"
    assert query["subject"] == ["Invoice #1001 from Studio"]
    assert query["body"] == ["Pay & enjoy 🔗"]


def test_mailto_url_rejects_bad_address():
    with pytest.raises(ValueError):
        build_mailto_url("not-an-email", "s", "b")


def test_email_subject():
    assert email_subject("1001", "Lopez Studio") == "Invoice #1001 from Lopez Studio"

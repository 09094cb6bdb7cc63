"""Base notification template catalog.

One base template per (category, channel) pair. The catalog is an object so
callers can swap it (e.g. loaded from a TOML file) without code changes.
"""

import os
import tomllib
from pathlib import Path
from typing import Mapping, Optional

from invoicekit.domain.entities import Channel, MessageCategory
from invoicekit.domain.errors import ValidationError

# Placeholders understood by the message resolver, written as {name}.
PLACEHOLDERS = (
    "number",
    "amount",
    "balance-due",
    "balance",
    "invoice-link",
    "payment-link",
    "payment-description",
    "payment-instructions",
)

_PENDING_CHAT = """Dear customer,

Please find your pending invoice below:

📄 Invoice #{number}
💰 Total: {amount}
⚖️ Balance due: {balance-due}

🔗 View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

Thank you for your business.
Kind regards."""

_PENDING_EMAIL = """Dear customer,

Please find your pending invoice below.

Invoice #{number}
Total: {amount}
Balance due: {balance-due}

View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

Thank you for your business.
Kind regards."""

_PAID_CHAT = """Dear customer,

Your invoice has been paid successfully:

📄 Invoice #{number}
💰 Total: {amount}
✅ Status: Paid

🔗 View invoice: {invoice-link}

Thank you for your payment.
Kind regards."""

_PAID_EMAIL = """Dear customer,

Your invoice has been paid successfully.

Invoice #{number}
Total: {amount}
Status: Paid

View invoice: {invoice-link}

Thank you for your payment.
Kind regards."""

_OVERDUE_CHAT = """Dear customer,

Your invoice is past due:

📄 Invoice #{number}
💰 Total: {amount}
⚖️ Balance due: {balance-due}
⚠️ Status: Overdue

🔗 View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

We appreciate you bringing your account up to date.
Kind regards."""

_OVERDUE_EMAIL = """Dear customer,

Your invoice is past due.

Invoice #{number}
Total: {amount}
Balance due: {balance-due}
Status: Overdue

View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

We appreciate you bringing your account up to date.
Kind regards."""

_DUE_SOON_CHAT = """Dear customer,

Friendly reminder that your invoice is due soon:

📄 Invoice #{number}
💰 Total: {amount}
⚖️ Balance due: {balance-due}
⏰ Status: Due soon

🔗 View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

Thank you for your business.
Kind regards."""

_DUE_SOON_EMAIL = """Dear customer,

This is a friendly reminder that your invoice is due soon.

Invoice #{number}
Total: {amount}
Balance due: {balance-due}
Status: Due soon

View invoice: {invoice-link}

To pay the outstanding balance:
{payment-instructions}

Thank you for your business.
Kind regards."""

DEFAULT_TEMPLATES: dict[MessageCategory, dict[Channel, str]] = {
    MessageCategory.PENDING: {Channel.CHAT: _PENDING_CHAT, Channel.EMAIL: _PENDING_EMAIL},
    MessageCategory.PAID: {Channel.CHAT: _PAID_CHAT, Channel.EMAIL: _PAID_EMAIL},
    MessageCategory.OVERDUE: {Channel.CHAT: _OVERDUE_CHAT, Channel.EMAIL: _OVERDUE_EMAIL},
    MessageCategory.DUE_SOON: {Channel.CHAT: _DUE_SOON_CHAT, Channel.EMAIL: _DUE_SOON_EMAIL},
}


class TemplateCatalog:
    """Fixed base template text per (category, channel).

    Pairs missing from ``templates`` fall back to DEFAULT_TEMPLATES, so every
    pair always has exactly one base text.
    """

    def __init__(self, templates: Optional[Mapping[MessageCategory, Mapping[Channel, str]]] = None):
        self._templates: dict[tuple[MessageCategory, Channel], str] = {}
        for category, channels in DEFAULT_TEMPLATES.items():
            for channel, text in channels.items():
                self._templates[(category, channel)] = text
        for category, channels in (templates or {}).items():
            for channel, text in channels.items():
                if not isinstance(text, str) or not text.strip():
                    raise ValidationError(
                        f"Template for {MessageCategory(category).value}/{Channel(channel).value} must be non-empty text"
                    )
                self._templates[(MessageCategory(category), Channel(channel))] = text

    def base_template(self, category: MessageCategory, channel: Channel) -> str:
        return self._templates[(MessageCategory(category), Channel(channel))]

    def pairs(self) -> list[tuple[MessageCategory, Channel]]:
        return list(self._templates)

    @classmethod
    def from_toml(cls, path: str | Path) -> "TemplateCatalog":
        """Load overrides from a TOML file.

        The file holds one table per category with ``chat``/``email`` keys::

            [pending]
            chat = "Invoice #{number}: {balance-due} due"

        Raises:
            ValidationError: If the file names an unknown category or channel
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        templates: dict[MessageCategory, dict[Channel, str]] = {}
        for category_name, channels in data.items():
            try:
                category = MessageCategory(category_name)
            except ValueError as e:
                raise ValidationError(f"Unknown message category '{category_name}' in {path}") from e
            if not isinstance(channels, dict):
                raise ValidationError(f"Category '{category_name}' in {path} must be a table")
            for channel_name, text in channels.items():
                try:
                    channel = Channel(channel_name)
                except ValueError as e:
                    raise ValidationError(f"Unknown channel '{channel_name}' in {path}") from e
                templates.setdefault(category, {})[channel] = text
        return cls(templates)


def load_catalog(path: Optional[str] = None) -> TemplateCatalog:
    """Build the catalog from a TOML file, INVOICEKIT_TEMPLATES_PATH, or defaults."""
    if path is None:
        path = os.environ.get("INVOICEKIT_TEMPLATES_PATH")
    if path is None:
        return TemplateCatalog()
    return TemplateCatalog.from_toml(path)

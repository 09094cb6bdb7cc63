"""Links handed to external delivery launchers.

Nothing here sends anything; these only build URLs from resolved text.
"""

import re
from urllib.parse import quote

DEFAULT_PUBLIC_BASE_URL = "http://localhost:3000"


def build_public_invoice_url(base_url: str, invoice_id: int) -> str:
    """Public URL where a client can view the invoice document."""
    return f"{base_url.rstrip('/')}/api/invoices/{invoice_id}/pdf/public"


def build_chat_url(phone: str, text: str) -> str:
    """wa.me launcher URL with the message pre-filled.

    Raises:
        ValueError: If the phone number has no digits
    """
    digits = re.sub(r"\D", "", phone or "")
    if not digits:
        raise ValueError(f"Phone number '{phone}' has no digits")
    return f"https://wa.me/{digits}?text={quote(text, safe='')}"


def build_mailto_url(email: str, subject: str, body: str) -> str:
    """mailto: URL with subject and body pre-filled."""
    if not email or "@" not in email:
        raise ValueError(f"Invalid email address '{email}'")
    return f"mailto:{email}?subject={quote(subject, safe='')}&body={quote(body, safe='')}"


def email_subject(display_number: str, business_name: str) -> str:
    return f"Invoice #{display_number} from {business_name}"

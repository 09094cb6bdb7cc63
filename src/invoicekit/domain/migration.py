"""Rewrite of legacy personalized templates.

Older templates rendered payment details with a fixed instructional phrase
plus the {payment-link}/{payment-description} pair. The current schema uses
the single {payment-instructions} placeholder instead.
"""

import re

LEGACY_PHRASE = "To pay the outstanding balance, use the following link:"
LEGACY_PLACEHOLDERS = ("{payment-link}", "{payment-description}")
UNIFIED_FRAGMENT = "To pay the outstanding balance:\n{payment-instructions}"

LEGACY_FRAGMENT_PATTERN = re.compile(
    re.escape(LEGACY_PHRASE)
    + r"\s*🔗\s*\{payment-link\}"
    + r"\s*📝\s*Additional instructions:\s*\{payment-description\}"
)


def needs_migration(content: str) -> bool:
    """True when content still carries the legacy payment fragment."""
    if LEGACY_PHRASE not in content:
        return False
    if not all(token in content for token in LEGACY_PLACEHOLDERS):
        return False
    return LEGACY_FRAGMENT_PATTERN.search(content) is not None


def migrate_content(content: str) -> str:
    """Replace every legacy fragment with the unified placeholder.

    Content without the legacy fragment is returned unchanged, so applying
    this twice gives the same result as applying it once.
    """
    if not needs_migration(content):
        return content
    return LEGACY_FRAGMENT_PATTERN.sub(lambda _match: UNIFIED_FRAGMENT, content)

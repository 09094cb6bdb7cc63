"""Tests for the legacy template rewrite."""

from invoicekit.domain.migration import UNIFIED_FRAGMENT, migrate_content, needs_migration

LEGACY_CHAT = (
    "Invoice #{number}\n\n"
    "To pay the outstanding balance, use the following link:\n"
    "🔗 {payment-link}\n\n"
    "📝 Additional instructions: {payment-description}\n\n"
    "Thanks!"
)


class TestMigrateContent:
    """Test detection and rewrite of the legacy payment fragment."""

    def test_legacy_fragment_detected(self):
        assert needs_migration(LEGACY_CHAT)

    def test_rewrites_to_unified_placeholder(self):
        migrated = migrate_content(LEGACY_CHAT)

        assert migrated == "Invoice #{number}\n\n" + UNIFIED_FRAGMENT + "\n\nThanks!"
        assert "{payment-link}" not in migrated
        assert "{payment-description}" not in migrated

    def test_idempotent(self):
        once = migrate_content(LEGACY_CHAT)

        assert migrate_content(once) == once
        assert not needs_migration(once)

    def test_whitespace_variations(self):
        legacy = (
            "To pay the outstanding balance, use the following link:  🔗{payment-link} "
            "📝 Additional instructions:\n{payment-description}"
        )

        assert migrate_content(legacy) == UNIFIED_FRAGMENT

    def test_placeholders_without_phrase_untouched(self):
        content = "Pay here {payment-link}. Notes: {payment-description}"

        assert not needs_migration(content)
        assert migrate_content(content) == content

    def test_phrase_without_placeholders_untouched(self):
        content = "To pay the outstanding balance, use the following link: https://pay.example.com"

        assert migrate_content(content) == content

    def test_current_content_untouched(self):
        content = "Invoice #{number}\n" + UNIFIED_FRAGMENT

        assert migrate_content(content) == content

    def test_surrounding_custom_text_preserved(self):
        legacy = "Hi Ana!\n" + LEGACY_CHAT + "\nP.S. see you soon"

        migrated = migrate_content(legacy)

        assert migrated.startswith("Hi Ana!\nInvoice #{number}")
        assert migrated.endswith("Thanks!\nP.S. see you soon")

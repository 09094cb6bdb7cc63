"""Tests for MessageTemplateService (the template store)."""

import logging

import pytest
from sqlalchemy.exc import OperationalError

from invoicekit.domain.entities import BaseContent, Channel, CustomContent, MessageCategory
from invoicekit.domain.errors import MigrationFailure, NotFoundError, TemplateNotFound, ValidationError
from invoicekit.domain.messages import MessageTemplateService
from invoicekit.domain.migration import UNIFIED_FRAGMENT
from invoicekit.domain.templates import TemplateCatalog

LEGACY = (
    "Hello! Invoice #{number}\n"
    "To pay the outstanding balance, use the following link:\n"
    "🔗 {payment-link}\n"
    "📝 Additional instructions: {payment-description}"
)


class TestStoredMessages:
    """Test lazy creation, editing and restore."""

    def test_missing_message(self, message_service):
        assert message_service.get_message(MessageCategory.PENDING, Channel.CHAT) is None
        with pytest.raises(TemplateNotFound):
            message_service.require_message(MessageCategory.PENDING, Channel.CHAT)

    def test_get_or_create_uses_base_template(self, message_service, catalog):
        message = message_service.get_or_create_message(MessageCategory.OVERDUE, Channel.EMAIL)

        assert not message.personalized
        assert message.content == BaseContent()
        assert message.base_template == catalog.base_template(MessageCategory.OVERDUE, Channel.EMAIL)
        assert message_service.effective_text(message) == message.base_template

    def test_get_or_create_is_stable(self, message_service):
        first = message_service.get_or_create_message(MessageCategory.PAID, Channel.CHAT)
        second = message_service.get_or_create_message(MessageCategory.PAID, Channel.CHAT)

        assert first.id == second.id
        assert len(message_service.list_messages()) == 1

    def test_save_marks_personalized(self, message_service):
        message = message_service.get_or_create_message(MessageCategory.PENDING, Channel.CHAT)

        saved = message_service.save_message(message.id, "Invoice #{number} is ready")

        assert saved.personalized
        assert saved.content == CustomContent("Invoice #{number} is ready")
        assert message_service.effective_text(saved) == "Invoice #{number} is ready"

    def test_custom_content_survives_reload(self, message_service):
        message = message_service.get_or_create_message(MessageCategory.PENDING, Channel.CHAT)
        message_service.save_message(message.id, "Custom text")

        reloaded = message_service.require_message(MessageCategory.PENDING, Channel.CHAT)

        assert reloaded.content == CustomContent("Custom text")

    def test_empty_custom_content_rejected(self, message_service):
        message = message_service.get_or_create_message(MessageCategory.PENDING, Channel.CHAT)

        with pytest.raises(ValidationError, match="cannot be empty"):
            message_service.save_content(message.id, CustomContent("  "))

    def test_restore_to_base(self, message_service, catalog):
        message = message_service.get_or_create_message(MessageCategory.DUE_SOON, Channel.CHAT)
        message_service.save_message(message.id, "Custom text")

        restored = message_service.restore_to_base(message.id)

        assert not restored.personalized
        assert message_service.effective_text(restored) == catalog.base_template(
            MessageCategory.DUE_SOON, Channel.CHAT
        )

    def test_save_unknown_message(self, message_service):
        with pytest.raises(NotFoundError):
            message_service.save_message(99, "text")

    def test_base_content_follows_catalog_changes(self, temp_db):
        MessageTemplateService(temp_db).get_or_create_message(MessageCategory.PAID, Channel.CHAT)
        updated_catalog = TemplateCatalog({MessageCategory.PAID: {Channel.CHAT: "Paid, thanks! #{number}"}})

        service = MessageTemplateService(temp_db, updated_catalog)
        message = service.require_message(MessageCategory.PAID, Channel.CHAT)

        assert service.effective_text(message) == "Paid, thanks! #{number}"


class TestMigrationOnRead:
    """Test that legacy personalized content is migrated when read."""

    def _store_legacy(self, service):
        message = service.get_or_create_message(MessageCategory.PENDING, Channel.CHAT)
        service.db.update_message(message.id, content=LEGACY, personalized=True)
        return message.id

    def test_read_returns_and_persists_migrated_content(self, message_service, temp_db):
        message_id = self._store_legacy(message_service)

        message = message_service.require_message(MessageCategory.PENDING, Channel.CHAT)

        assert message.content == CustomContent("Hello! Invoice #{number}\n" + UNIFIED_FRAGMENT)
        assert temp_db.get_message_by_id(message_id).content == message.content

    def test_migration_is_logged(self, message_service, caplog):
        self._store_legacy(message_service)

        with caplog.at_level(logging.INFO, logger="invoicekit.domain.messages"):
            message_service.require_message(MessageCategory.PENDING, Channel.CHAT)

        assert "Migrated pending/chat message" in caplog.text

    def test_persist_failure_serves_unmigrated_content(self, message_service, monkeypatch, caplog):
        self._store_legacy(message_service)

        def fail(*args, **kwargs):
            raise OperationalError("UPDATE predefined_messages", {}, Exception("database is locked"))

        monkeypatch.setattr(message_service.db, "update_message", fail)
        with caplog.at_level(logging.WARNING, logger="invoicekit.domain.messages"):
            message = message_service.require_message(MessageCategory.PENDING, Channel.CHAT)

        assert message.content == CustomContent(LEGACY)
        assert "Serving un-migrated content" in caplog.text

    def test_list_messages_migrates(self, message_service):
        self._store_legacy(message_service)

        [message] = message_service.list_messages()

        assert "{payment-instructions}" in message.content.text

    def test_migrate_all(self, message_service):
        self._store_legacy(message_service)
        message_service.get_or_create_message(MessageCategory.PAID, Channel.EMAIL)

        assert message_service.migrate_all() == 1
        assert message_service.migrate_all() == 0

    def test_migrate_all_raises_on_storage_failure(self, message_service, monkeypatch):
        self._store_legacy(message_service)

        def fail(*args, **kwargs):
            raise OperationalError("UPDATE predefined_messages", {}, Exception("disk I/O error"))

        monkeypatch.setattr(message_service.db, "update_message", fail)
        with pytest.raises(MigrationFailure, match="disk I/O error"):
            message_service.migrate_all()

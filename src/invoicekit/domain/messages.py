"""Predefined message (template store) domain service."""

import logging
from dataclasses import replace
from typing import Optional

from invoicekit.database.base import Database
from invoicekit.domain.entities import (
    BaseContent,
    Channel,
    CustomContent,
    MessageCategory,
    MessageContent,
    PredefinedMessage,
)
from invoicekit.domain.errors import (
    MigrationFailure,
    NotFoundError,
    TemplateNotFound,
    ValidationError,
    message_not_found,
)
from invoicekit.domain.migration import migrate_content
from invoicekit.domain.templates import TemplateCatalog

logger = logging.getLogger(__name__)


class MessageTemplateService:
    """Stores one message per (category, channel) on top of the base catalog.

    Every read runs the legacy template migration and writes the migrated
    content back before returning it.
    """

    def __init__(self, db: Database, catalog: Optional[TemplateCatalog] = None):
        """Initialize message template service.

        Args:
            db: Database instance
            catalog: Base template catalog (defaults to the built-in templates)
        """
        self.db = db
        self.catalog = catalog or TemplateCatalog()

    def get_message(self, category: MessageCategory, channel: Channel) -> Optional[PredefinedMessage]:
        """Get the stored message for a pair, migrated to the current schema.

        Returns:
            PredefinedMessage or None if none has been created yet
        """
        message = self.db.get_message(MessageCategory(category), Channel(channel))
        if message is None:
            return None
        return self._migrate(message)

    def require_message(self, category: MessageCategory, channel: Channel) -> PredefinedMessage:
        """Get the stored message for a pair or raise TemplateNotFound."""
        message = self.get_message(category, channel)
        if message is None:
            raise TemplateNotFound(
                f"No message stored for {MessageCategory(category).value}/{Channel(channel).value}"
            )
        return message

    def create_message(self, category: MessageCategory, channel: Channel) -> PredefinedMessage:
        """Create the stored message for a pair from its base template."""
        category, channel = MessageCategory(category), Channel(channel)
        base = self.catalog.base_template(category, channel)
        message_id = self.db.create_message(
            category=category,
            channel=channel,
            base_template=base,
            content=base,
            personalized=False,
        )
        logger.info("Created %s/%s message from base template", category.value, channel.value)
        return self._require_by_id(message_id)

    def get_or_create_message(self, category: MessageCategory, channel: Channel) -> PredefinedMessage:
        """Return the stored message for a pair, creating it lazily."""
        try:
            return self.require_message(category, channel)
        except TemplateNotFound:
            return self.create_message(category, channel)

    def list_messages(self) -> list[PredefinedMessage]:
        """List stored messages."""
        return [self._migrate(m) for m in self.db.list_messages()]

    def save_message(self, message_id: int, content: str, personalized: bool = True) -> PredefinedMessage:
        """Save edited content.

        Args:
            message_id: Message ID
            content: Template text
            personalized: False makes the message mirror its base template again

        Raises:
            NotFoundError: If the message doesn't exist
            ValidationError: If personalized content is empty
        """
        if personalized:
            return self.save_content(message_id, CustomContent(content))
        return self.save_content(message_id, BaseContent())

    def save_content(self, message_id: int, content: MessageContent) -> PredefinedMessage:
        """Store a BaseContent or CustomContent variant for a message."""
        message = self._require_by_id(message_id)
        if isinstance(content, CustomContent):
            if not content.text.strip():
                raise ValidationError("Message content cannot be empty")
            self.db.update_message(message.id, content=content.text, personalized=True)
        else:
            base = self.catalog.base_template(message.category, message.channel)
            self.db.update_message(message.id, content=base, personalized=False)
        return self._require_by_id(message_id)

    def restore_to_base(self, message_id: int) -> PredefinedMessage:
        """Reset a message to its base template and clear personalization."""
        message = self.save_content(message_id, BaseContent())
        logger.info(
            "Restored %s/%s message to base template", message.category.value, message.channel.value
        )
        return message

    def effective_text(self, message: PredefinedMessage) -> str:
        """Template text used for rendering: custom content or the base template."""
        if isinstance(message.content, CustomContent):
            return message.content.text
        return self.catalog.base_template(message.category, message.channel)

    def migrate_all(self) -> int:
        """Migrate every stored legacy message in one pass.

        Unlike reads, a storage failure here is not downgraded to a warning.

        Returns:
            Number of messages rewritten

        Raises:
            MigrationFailure: If a migrated message cannot be persisted
        """
        migrated_count = 0
        for message in self.db.list_messages():
            if not isinstance(message.content, CustomContent):
                continue
            migrated = migrate_content(message.content.text)
            if migrated == message.content.text:
                continue
            self._store_migrated(message, migrated)
            migrated_count += 1
        logger.info("Migrated %d legacy message(s)", migrated_count)
        return migrated_count

    def _require_by_id(self, message_id: int) -> PredefinedMessage:
        message = self.db.get_message_by_id(message_id)
        if message is None:
            raise NotFoundError(message_not_found(message_id))
        return message

    def _migrate(self, message: PredefinedMessage) -> PredefinedMessage:
        # Base content always renders from the catalog, so only custom text can be legacy
        if not isinstance(message.content, CustomContent):
            return message
        migrated = migrate_content(message.content.text)
        if migrated == message.content.text:
            return message
        try:
            self._store_migrated(message, migrated)
        except MigrationFailure as e:
            logger.warning("Serving un-migrated content for message %s: %s", message.id, e)
            return message
        logger.info(
            "Migrated %s/%s message to the unified payment instructions placeholder",
            message.category.value,
            message.channel.value,
        )
        return replace(message, content=CustomContent(migrated))

    def _store_migrated(self, message: PredefinedMessage, content: str) -> None:
        try:
            self.db.update_message(message.id, content=content, personalized=True)
        except Exception as e:
            raise MigrationFailure(f"could not persist migrated message {message.id}: {e}") from e

"""Hooks for the external document renderer.

The core never renders invoice documents. It only tells a listener that a
rendered document went stale or must be destroyed.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class DocumentListener(ABC):
    """Receives document lifecycle signals for invoices."""

    @abstractmethod
    def mark_stale(self, invoice_id: int) -> None:
        """The invoice's rendered document must be regenerated."""
        pass

    @abstractmethod
    def discard(self, invoice_id: int) -> None:
        """The invoice was erased; its rendered document must be destroyed."""
        pass


class LoggingDocumentListener(DocumentListener):
    """Default listener that only records the signals in the log."""

    def mark_stale(self, invoice_id: int) -> None:
        logger.info("Document for invoice %s is stale", invoice_id)

    def discard(self, invoice_id: int) -> None:
        logger.info("Document for invoice %s should be destroyed", invoice_id)

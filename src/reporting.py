"""
Structured reporting of processed transactions.

The processor writes one ProcessingEvent per attempt into an injected sink.
The default sink forwards events to the stdlib logging module with the event
fields attached to the log record, so JSONFormatter can emit them as-is.
"""

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

EVENT_FIELDS = ("kind", "tx", "client", "error")


@dataclass(frozen=True)
class ProcessingEvent:
    kind: TransactionType
    tx: int
    client: int
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, transaction: Transaction) -> "ProcessingEvent":
        return cls(transaction.transaction_type, transaction.transaction_id, transaction.client_id)

    @classmethod
    def failure(cls, transaction: Transaction, error: Exception) -> "ProcessingEvent":
        return cls(transaction.transaction_type, transaction.transaction_id, transaction.client_id, str(error))

    def as_fields(self) -> dict:
        fields = {"kind": self.kind.value, "tx": self.tx, "client": self.client}
        if self.error is not None:
            fields["error"] = self.error
        return fields


EventSink = Callable[[ProcessingEvent], None]


def logging_sink(event: ProcessingEvent) -> None:
    """Log successes at DEBUG and failures at WARNING."""
    if event.succeeded:
        logger.debug(f"{event.kind.value} tx {event.tx} for client {event.client} processed", extra=event.as_fields())
    else:
        logger.warning(
            f"{event.kind.value} tx {event.tx} for client {event.client} rejected: {event.error}",
            extra=event.as_fields(),
        )


class JSONFormatter(logging.Formatter):
    """One JSON object per log record, including any transaction event fields."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EVENT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(level: str = "WARNING", log_format: str = "text") -> None:
    """Send all logging to stderr, keeping stdout free for the account statement."""
    handler = logging.StreamHandler(sys.stderr)
    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

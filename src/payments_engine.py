import csv
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats
from reporting import EventSink
from state_manager import LedgerStore, InMemoryLedgerStore
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds transactions to the processor strictly in input order.
    A rejected transaction is reported and skipped; the run always continues.
    """

    def __init__(self, store: Optional[LedgerStore] = None, sink: Optional[EventSink] = None):
        self._store = store if store is not None else InMemoryLedgerStore()
        self._processor = TransactionProcessor(self._store, sink)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        with open(filepath, "r", newline="") as f:
            accounts = self.process_transactions(read_transactions(f))

        # Print final processing report to stderr
        print(f"Processed: {self._stats.processed}, Failed: {self._stats.failed}", file=sys.stderr)

        return accounts

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)
            if result == ProcessingResult.SUCCESS:
                self._stats.record_success()
            else:
                self._stats.record_failure()

        return self._store.get_all_accounts()


def read_transactions(lines: Iterable[str]) -> Iterator[Transaction]:
    """Lazily parse CSV lines into transactions, skipping malformed rows."""
    reader = csv.DictReader(lines)
    for row in reader:
        transaction = parse_csv_row(row)
        if transaction:
            yield transaction


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"])
        transaction_id = _parse_id(normalized["tx"])

        amount = None
        if transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = Decimal(amount_str)
                if not amount.is_finite():
                    raise ValueError(f"amount must be finite, got {amount_str}")

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e!r}")
        return None


def _parse_id(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise ValueError(f"identifier must be unsigned, got {value}")
    return parsed

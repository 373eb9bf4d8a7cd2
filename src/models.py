from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class TransactionState(Enum):
    """Lifecycle stage of a stored transaction."""

    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    DISPUTED = "Disputed"
    RESOLVED = "Resolved"
    CHARGED_BACK = "ChargedBack"


class ProcessingResult(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class Transaction:
    """An incoming transaction event, as read from the input."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class StoredTransaction:
    """
    A transaction as held by the ledger store.
    Only the state ever changes, and only by replacing the whole record.
    """

    transaction_id: int
    client_id: int
    amount: Decimal
    state: TransactionState

    def with_state(self, state: TransactionState) -> "StoredTransaction":
        return replace(self, state=state)

    def describe_state(self) -> str:
        return f"{self.state.value}({self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def copy(self) -> "ClientAccount":
        return replace(self)

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

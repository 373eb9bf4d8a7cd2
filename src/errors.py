from decimal import Decimal
from typing import Optional

from models import StoredTransaction, TransactionState


class TransactionError(Exception):
    """Base class for a rejected transaction. Never fatal to a run."""


class InvalidAmount(TransactionError):
    def __init__(self, transaction_id: int, amount: Optional[Decimal]):
        super().__init__(f"transaction {transaction_id} has invalid amount {amount}")
        self.transaction_id = transaction_id
        self.amount = amount


class DuplicateTransaction(TransactionError):
    def __init__(self, transaction_id: int):
        super().__init__(f"transaction {transaction_id} already exists")
        self.transaction_id = transaction_id


class UnknownTransaction(TransactionError):
    def __init__(self, transaction_id: int):
        super().__init__(f"transaction {transaction_id} does not exist")
        self.transaction_id = transaction_id


class ClientMismatch(TransactionError):
    def __init__(self, transaction_id: int, expected_client_id: int, client_id: int):
        super().__init__(
            f"transaction {transaction_id} belongs to client {expected_client_id}, not client {client_id}"
        )
        self.transaction_id = transaction_id
        self.expected_client_id = expected_client_id
        self.client_id = client_id


class IllegalTransition(TransactionError):
    def __init__(self, transaction: StoredTransaction, target: TransactionState):
        super().__init__(
            f"unable to move transaction {transaction.transaction_id} "
            f"from {transaction.describe_state()} to {target.value}"
        )
        self.transaction_id = transaction.transaction_id
        self.source = transaction.state
        self.target = target


class AccountLocked(TransactionError):
    def __init__(self, client_id: int):
        super().__init__(f"account for client {client_id} is locked")
        self.client_id = client_id


class InsufficientFunds(TransactionError):
    def __init__(self, client_id: int, available: Decimal, amount: Decimal):
        super().__init__(f"insufficient funds: client {client_id} has {available} available, needs {amount}")
        self.client_id = client_id
        self.available = available
        self.amount = amount

from decimal import Decimal
from typing import Dict, Optional, Tuple

from errors import (
    AccountLocked,
    ClientMismatch,
    DuplicateTransaction,
    IllegalTransition,
    InsufficientFunds,
    InvalidAmount,
    TransactionError,
    UnknownTransaction,
)
from models import (
    ClientAccount,
    ProcessingResult,
    StoredTransaction,
    Transaction,
    TransactionState,
    TransactionType,
)
from reporting import EventSink, ProcessingEvent, logging_sink
from state_manager import LedgerStore

# Every legal (current state, event) pair. None is a transaction not yet stored.
TRANSITIONS: Dict[Tuple[Optional[TransactionState], TransactionType], TransactionState] = {
    (None, TransactionType.DEPOSIT): TransactionState.DEPOSIT,
    (None, TransactionType.WITHDRAWAL): TransactionState.WITHDRAWAL,
    (TransactionState.DEPOSIT, TransactionType.DISPUTE): TransactionState.DISPUTED,
    (TransactionState.DISPUTED, TransactionType.RESOLVE): TransactionState.RESOLVED,
    (TransactionState.DISPUTED, TransactionType.CHARGEBACK): TransactionState.CHARGED_BACK,
}

# State each event would move a transaction into, used to name failed transitions.
TARGET_STATES: Dict[TransactionType, TransactionState] = {
    TransactionType.DEPOSIT: TransactionState.DEPOSIT,
    TransactionType.WITHDRAWAL: TransactionState.WITHDRAWAL,
    TransactionType.DISPUTE: TransactionState.DISPUTED,
    TransactionType.RESOLVE: TransactionState.RESOLVED,
    TransactionType.CHARGEBACK: TransactionState.CHARGED_BACK,
}


def next_state(current: Optional[TransactionState], transaction_type: TransactionType) -> Optional[TransactionState]:
    """Return the state reached by applying transaction_type, or None if not allowed."""
    return TRANSITIONS.get((current, transaction_type))


class TransactionProcessor:
    """
    Processes transactions against a ledger store, one at a time.

    apply() raises a TransactionError subclass on rejection.
    process_transaction() reports every attempt to the event sink and
    turns rejections into ProcessingResult.FAILED.

    All checks run before anything is written, so a rejected transaction
    leaves both the account and the transaction record untouched.
    """

    def __init__(self, store: LedgerStore, sink: Optional[EventSink] = None):
        self._store = store
        self._sink = sink if sink is not None else logging_sink

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Processed successfully
            FAILED: Rejected; state is unchanged and the error went to the sink
        """
        try:
            self.apply(transaction)
        except TransactionError as e:
            self._sink(ProcessingEvent.failure(transaction, e))
            return ProcessingResult.FAILED

        self._sink(ProcessingEvent.success(transaction))
        return ProcessingResult.SUCCESS

    def apply(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> None:
        amount = self._validate_amount(transaction)
        state = self._new_transaction_state(transaction)
        account = self._load_unlocked_account(transaction.client_id)

        account.credit(amount)
        self._commit(account, StoredTransaction(transaction.transaction_id, transaction.client_id, amount, state))

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        amount = self._validate_amount(transaction)
        state = self._new_transaction_state(transaction)
        account = self._load_unlocked_account(transaction.client_id)

        if account.available < amount:
            raise InsufficientFunds(account.client_id, account.available, amount)

        account.debit(amount)
        self._commit(account, StoredTransaction(transaction.transaction_id, transaction.client_id, amount, state))

    def _handle_dispute(self, transaction: Transaction) -> None:
        original = self._load_referenced_transaction(transaction)
        state = self._transition(original, TransactionType.DISPUTE)
        account = self._load_unlocked_account(original.client_id)

        # No sufficiency check: a dispute after a withdrawal can leave available negative.
        account.hold(original.amount)
        self._commit(account, original.with_state(state))

    def _handle_resolve(self, transaction: Transaction) -> None:
        original = self._load_referenced_transaction(transaction)
        state = self._transition(original, TransactionType.RESOLVE)
        account = self._store.get_account(original.client_id)

        account.release_hold(original.amount)
        self._commit(account, original.with_state(state))

    def _handle_chargeback(self, transaction: Transaction) -> None:
        original = self._load_referenced_transaction(transaction)
        state = self._transition(original, TransactionType.CHARGEBACK)
        account = self._store.get_account(original.client_id)

        account.remove_held(original.amount)
        account.lock()
        self._commit(account, original.with_state(state))

    @staticmethod
    def _validate_amount(transaction: Transaction) -> Decimal:
        if transaction.amount is None or not transaction.amount.is_finite() or transaction.amount <= 0:
            raise InvalidAmount(transaction.transaction_id, transaction.amount)
        return transaction.amount

    def _new_transaction_state(self, transaction: Transaction) -> TransactionState:
        if self._store.get_transaction(transaction.transaction_id) is not None:
            raise DuplicateTransaction(transaction.transaction_id)
        return next_state(None, transaction.transaction_type)

    def _load_referenced_transaction(self, transaction: Transaction) -> StoredTransaction:
        original = self._store.get_transaction(transaction.transaction_id)
        if original is None:
            raise UnknownTransaction(transaction.transaction_id)
        if original.client_id != transaction.client_id:
            raise ClientMismatch(transaction.transaction_id, original.client_id, transaction.client_id)
        return original

    @staticmethod
    def _transition(original: StoredTransaction, transaction_type: TransactionType) -> TransactionState:
        state = next_state(original.state, transaction_type)
        if state is None:
            raise IllegalTransition(original, TARGET_STATES[transaction_type])
        return state

    def _load_unlocked_account(self, client_id: int) -> ClientAccount:
        account = self._store.get_account(client_id)
        if account.locked:
            raise AccountLocked(client_id)
        return account

    def _commit(self, account: ClientAccount, transaction: StoredTransaction) -> None:
        self._store.put_account(account)
        self._store.put_transaction(transaction)

from abc import ABC, abstractmethod
from typing import Dict, Optional

from models import StoredTransaction, ClientAccount


class LedgerStore(ABC):
    """
    Storage for transaction records and client accounts.
    Performs no validation; the processor is trusted completely.
    """

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Retrieve stored transaction by ID."""

    @abstractmethod
    def put_transaction(self, transaction: StoredTransaction) -> None:
        """Insert or overwrite a transaction record."""

    @abstractmethod
    def get_account(self, client_id: int) -> ClientAccount:
        """
        Get existing account or a new default one.
        A new account is not stored until put_account is called with it.
        """

    @abstractmethod
    def put_account(self, account: ClientAccount) -> None:
        """Insert or overwrite an account."""

    @abstractmethod
    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""


class InMemoryLedgerStore(LedgerStore):
    """
    Dict-backed store for a single run.
    Accounts are copied in and out so callers never hold a live reference.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, StoredTransaction] = {}

    def get_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        return self._transactions.get(transaction_id)

    def put_transaction(self, transaction: StoredTransaction) -> None:
        self._transactions[transaction.transaction_id] = transaction

    def get_account(self, client_id: int) -> ClientAccount:
        account = self._accounts.get(client_id)
        if account is None:
            return ClientAccount(client_id=client_id)
        return account.copy()

    def put_account(self, account: ClientAccount) -> None:
        self._accounts[account.client_id] = account.copy()

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        return {client_id: account.copy() for client_id, account in self._accounts.items()}

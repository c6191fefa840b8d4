import logging

from models import Transaction, TransactionType, ClientAccount, DisputeState, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to client accounts.

    Every rule violation leaves the account untouched and is reported through
    the returned ProcessingResult plus a debug log line. Nothing raises.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the account
            anything else: Rejected, account unchanged
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.debug(f"Client {account.client_id} is locked, skipping {transaction}")
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            logger.debug(f"Deposit tx {transaction.transaction_id} for client {account.client_id}: missing amount")
            return ProcessingResult.MISSING_AMOUNT

        account.credit(transaction.amount)
        account.record(transaction.transaction_id, transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            logger.debug(f"Withdrawal tx {transaction.transaction_id} for client {account.client_id}: missing amount")
            return ProcessingResult.MISSING_AMOUNT

        if account.available < transaction.amount:
            logger.debug(
                f"Client {account.client_id} has insufficient funds for withdrawal of {transaction.amount}. "
                f"Available: {account.available}"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        # Stored negated so dispute arithmetic can treat every entry alike.
        account.record(transaction.transaction_id, -transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = account.get_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: not found for client {account.client_id}")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.state != DisputeState.NORMAL:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: transaction is {entry.state.value}")
            return ProcessingResult.INVALID_DISPUTE_STATE

        # Withdrawals have already left the account, there is nothing to hold.
        if entry.is_withdrawal:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: withdrawals cannot be disputed")
            return ProcessingResult.NOT_DISPUTABLE

        if entry.amount > account.available:
            logger.debug(
                f"Dispute for tx {transaction.transaction_id}: client {account.client_id} has insufficient available funds. "
                f"Available: {account.available}, transaction amount: {entry.amount}"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.hold(entry.amount)
        entry.state = DisputeState.DISPUTED
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = account.get_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"Resolve for tx {transaction.transaction_id}: not found for client {account.client_id}")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.state != DisputeState.DISPUTED:
            logger.debug(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.INVALID_DISPUTE_STATE

        account.release_hold(entry.amount)
        entry.state = DisputeState.NORMAL
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = account.get_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: not found for client {account.client_id}")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.state != DisputeState.DISPUTED:
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.INVALID_DISPUTE_STATE

        account.remove_held(entry.amount)
        account.locked = True
        entry.state = DisputeState.CHARGED_BACK
        return ProcessingResult.SUCCESS

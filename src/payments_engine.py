import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, List, Optional, TextIO

from models import Transaction, TransactionType, ClientAccount, AccountSnapshot, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

AMOUNT_TYPES = {TransactionType.DEPOSIT, TransactionType.WITHDRAWAL}


class PaymentsEngine:
    """
    Applies a transaction stream to client accounts in a single ordered pass.
    Later transactions can refer to earlier ones, so input order is preserved.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        # Undecodable bytes become U+FFFD so the row fails parsing instead of the run
        with open(filepath, "r", newline="", errors="replace") as f:
            accounts = self.process_transactions(read_transactions(f))

        logger.info(self._stats.summary())
        return accounts

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply transactions strictly in iteration order."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)
            self._stats.record(result)

        return self._state.get_all_accounts()

    def snapshot(self) -> List[AccountSnapshot]:
        """One row per known client, ordered by client id."""
        return [AccountSnapshot.from_account(self._state.get_account(client_id)) for client_id in self._state.client_ids()]


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """Yield transactions from CSV rows, dropping rows that fail to parse."""
    # Blank lines are skipped so a leading one is not taken as the header
    reader = csv.DictReader(line for line in stream if line.strip())
    for row in reader:
        transaction = parse_csv_row(row)
        if transaction:
            yield transaction


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if isinstance(k, str)}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        amount_str = normalized.get("amount", "")
        if transaction_type in AMOUNT_TYPES and amount_str:
            amount = _parse_amount(amount_str)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e!r}")
        return None


def _parse_id(value: str, maximum: int, name: str) -> int:
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Decimal:
    amount = Decimal(value)
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"invalid amount {value}")
    return amount

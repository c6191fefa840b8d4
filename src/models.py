from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    MISSING_AMOUNT = "missing_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    NOT_DISPUTABLE = "not_disputable"
    INVALID_DISPUTE_STATE = "invalid_dispute_state"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerEntry:
    """
    A deposit or withdrawal recorded against a client.
    Amount is signed: positive for deposits, negative for withdrawals.
    """

    amount: Decimal
    state: DisputeState = DisputeState.NORMAL

    @property
    def is_withdrawal(self) -> bool:
        return self.amount < 0


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    ledger: Dict[int, LedgerEntry] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> Decimal:
        return self.available + self.held

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

    def record(self, transaction_id: int, amount: Decimal) -> None:
        self.ledger[transaction_id] = LedgerEntry(amount=amount)

    def get_entry(self, transaction_id: int) -> Optional[LedgerEntry]:
        return self.ledger.get(transaction_id)


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: ClientAccount) -> "AccountSnapshot":
        return cls(
            client_id=account.client_id,
            available=account.available,
            held=account.held,
            total=account.total,
            locked=account.locked,
        )


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.results: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        self.results[result] += 1
        if result == ProcessingResult.SUCCESS:
            self.processed += 1
        else:
            self.failed += 1

    def summary(self) -> str:
        parts = [f"Processed: {self.processed}", f"Failed: {self.failed}"]
        for result, count in sorted(self.results.items(), key=lambda item: item[0].value):
            if result != ProcessingResult.SUCCESS:
                parts.append(f"{result.value}: {count}")
        return ", ".join(parts)

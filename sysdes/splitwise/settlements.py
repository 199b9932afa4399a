"""Payments that settle debts between group members."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now_stamp() -> str:
    return time.strftime(_TIMESTAMP_FORMAT, time.localtime())


class SettlementStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"


class SettlementMethod(Enum):
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    DIGITAL_WALLET = "Digital Wallet"
    CHECK = "Check"
    OTHER = "Other"


@dataclass
class Settlement:
    """A payment from one member to another; only pending ones change state."""

    settlement_id: str
    from_user_id: str
    to_user_id: str
    group_id: str
    amount: float
    currency: str = "USD"
    method: SettlementMethod = SettlementMethod.CASH
    description: str = ""
    status: SettlementStatus = SettlementStatus.PENDING
    created_at: str = field(default_factory=_now_stamp)
    date: str = ""
    completed_at: str = ""
    notes: str = ""
    transaction_reference: str = ""

    def __post_init__(self) -> None:
        if not self.date:
            self.date = self.created_at

    def mark_completed(self) -> None:
        if self.status is SettlementStatus.PENDING:
            self.status = SettlementStatus.COMPLETED
            self.completed_at = _now_stamp()

    def mark_cancelled(self) -> None:
        if self.status is SettlementStatus.PENDING:
            self.status = SettlementStatus.CANCELLED

    def mark_expired(self) -> None:
        if self.status is SettlementStatus.PENDING:
            self.status = SettlementStatus.EXPIRED

    def is_pending(self) -> bool:
        return self.status is SettlementStatus.PENDING

    def is_completed(self) -> bool:
        return self.status is SettlementStatus.COMPLETED

    def is_cancelled(self) -> bool:
        return self.status is SettlementStatus.CANCELLED

    def is_expired(self) -> bool:
        return self.status is SettlementStatus.EXPIRED

    def status_string(self) -> str:
        return self.status.value

    def method_string(self) -> str:
        return self.method.value

    def can_be_cancelled(self) -> bool:
        return self.is_pending()

    def can_be_completed(self) -> bool:
        return self.is_pending()

    def touch(self) -> None:
        self.date = _now_stamp()

    def formatted_amount(self) -> str:
        return f"{self.currency} {self.amount:.2f}"
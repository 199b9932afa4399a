"""Shared expenses and how they are split between group members."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_SPLIT_TOLERANCE = 0.01


def _now_stamp() -> str:
    return time.strftime(_TIMESTAMP_FORMAT, time.localtime())


class ExpenseCategory(Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    ACCOMMODATION = "Accommodation"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    UTILITIES = "Utilities"
    HEALTH = "Health"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    OTHER = "Other"


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    BANK_TRANSFER = "Bank Transfer"
    DIGITAL_WALLET = "Digital Wallet"
    CHECK = "Check"
    OTHER = "Other"


@dataclass
class SplitDetail:
    """One member's share of an expense."""

    user_id: str
    amount: float
    percentage: float = 0.0
    shares: int = 1
    is_paid: bool = False


@dataclass
class Expense:
    """An amount paid by one member and split among several."""

    expense_id: str
    description: str
    amount: float
    paid_by: str
    group_id: str
    category: ExpenseCategory = ExpenseCategory.OTHER
    payment_method: PaymentMethod = PaymentMethod.CASH
    currency: str = "USD"
    splits: list[SplitDetail] = field(default_factory=list)
    receipt_image: str = ""
    notes: str = ""
    is_settled: bool = False
    created_at: str = field(default_factory=_now_stamp)
    updated_at: str = ""
    date: str = ""

    def __post_init__(self) -> None:
        if not self.updated_at:
            self.updated_at = self.created_at
        if not self.date:
            self.date = self.created_at

    def add_split(self, split: SplitDetail) -> None:
        """Add a split, replacing any existing one for the same user."""
        self.remove_split(split.user_id)
        self.splits.append(split)

    def remove_split(self, user_id: str) -> None:
        self.splits = [s for s in self.splits if s.user_id != user_id]

    def update_split(
        self, user_id: str, amount: float, percentage: float = 0.0, shares: int = 1
    ) -> None:
        split = self.split_for(user_id)
        if split is not None:
            split.amount = amount
            split.percentage = percentage
            split.shares = shares

    def split_for(self, user_id: str) -> SplitDetail | None:
        return next((s for s in self.splits if s.user_id == user_id), None)

    def amount_for(self, user_id: str) -> float:
        split = self.split_for(user_id)
        return split.amount if split is not None else 0.0

    def has_split(self, user_id: str) -> bool:
        return self.split_for(user_id) is not None

    def split_equally(self, user_ids: list[str]) -> None:
        """Divide the amount evenly; an empty list leaves the splits alone."""
        if not user_ids:
            return
        count = len(user_ids)
        per_person = self.amount / count
        self.splits = [SplitDetail(uid, per_person, 100.0 / count, 1, False) for uid in user_ids]

    def split_by_percentage(self, user_ids: list[str], percentages: list[float]) -> None:
        if len(user_ids) != len(percentages):
            raise ValueError("User IDs and percentages must have the same size")
        self.splits = [
            SplitDetail(uid, self.amount * (pct / 100.0), pct, 1, False)
            for uid, pct in zip(user_ids, percentages)
        ]

    def split_by_shares(self, user_ids: list[str], shares: list[int]) -> None:
        if len(user_ids) != len(shares):
            raise ValueError("User IDs and shares must have the same size")
        total_shares = sum(shares)
        self.splits = [
            SplitDetail(uid, self.amount * (share / total_shares), 0.0, share, False)
            for uid, share in zip(user_ids, shares)
        ]

    def split_custom(self, splits: list[SplitDetail]) -> None:
        self.splits = list(splits)

    def category_string(self) -> str:
        return self.category.value

    def payment_method_string(self) -> str:
        return self.payment_method.value

    def total_split_amount(self) -> float:
        return sum((s.amount for s in self.splits), 0.0)

    def is_fully_split(self) -> bool:
        return abs(self.total_split_amount() - self.amount) < _SPLIT_TOLERANCE

    def involved_users(self) -> list[str]:
        return [s.user_id for s in self.splits]

    def mark_paid(self, user_id: str) -> None:
        split = self.split_for(user_id)
        if split is not None:
            split.is_paid = True

    def mark_unpaid(self, user_id: str) -> None:
        split = self.split_for(user_id)
        if split is not None:
            split.is_paid = False

    def is_user_paid(self, user_id: str) -> bool:
        split = self.split_for(user_id)
        return split.is_paid if split is not None else False

    def touch(self) -> None:
        self.updated_at = _now_stamp()

    def validate_splits(self) -> None:
        """Raise ValueError unless the splits add up to the expense amount."""
        if not self.is_fully_split():
            raise ValueError("Total split amount does not match expense amount")
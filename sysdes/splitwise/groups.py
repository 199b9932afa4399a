"""Groups of users who share expenses."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now_stamp() -> str:
    return time.strftime(_TIMESTAMP_FORMAT, time.localtime())


class GroupType(Enum):
    TRIP = "Trip"
    HOUSE = "House"
    COUPLE = "Couple"
    EVENT = "Event"
    PROJECT = "Project"
    OTHER = "Other"


class SplitType(Enum):
    EQUAL = "Equal"
    PERCENTAGE = "Percentage"
    SHARES = "Shares"
    CUSTOM = "Custom"


@dataclass
class Group:
    """A set of members with running balances and the expenses they share."""

    group_id: str
    name: str
    created_by: str
    group_type: GroupType = GroupType.OTHER
    description: str = ""
    currency: str = "USD"
    member_ids: list[str] = field(default_factory=list)
    member_balances: dict[str, float] = field(default_factory=dict)
    expense_ids: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=_now_stamp)
    updated_at: str = ""
    is_active: bool = True
    group_picture: str = ""

    def __post_init__(self) -> None:
        if not self.updated_at:
            self.updated_at = self.created_at
        self.add_member(self.created_by)

    def add_member(self, user_id: str) -> None:
        if not self.has_member(user_id):
            self.member_ids.append(user_id)
            self.member_balances[user_id] = 0.0

    def remove_member(self, user_id: str) -> None:
        self.member_ids = [m for m in self.member_ids if m != user_id]
        self.member_balances.pop(user_id, None)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.member_ids

    def member_count(self) -> int:
        return len(self.member_ids)

    def update_member_balance(self, user_id: str, amount: float) -> None:
        """Add ``amount`` to a member's balance; non-members are ignored."""
        if self.has_member(user_id):
            self.member_balances[user_id] = self.member_balances.get(user_id, 0.0) + amount

    def member_balance(self, user_id: str) -> float:
        return self.member_balances.get(user_id, 0.0)

    def total_balance(self) -> float:
        return sum(self.member_balances.values(), 0.0)

    def reset_balances(self) -> None:
        for user_id in self.member_balances:
            self.member_balances[user_id] = 0.0

    def add_expense(self, expense_id: str) -> None:
        if expense_id not in self.expense_ids:
            self.expense_ids.append(expense_id)

    def remove_expense(self, expense_id: str) -> None:
        self.expense_ids = [e for e in self.expense_ids if e != expense_id]

    def has_expense(self, expense_id: str) -> bool:
        return expense_id in self.expense_ids

    def expense_count(self) -> int:
        return len(self.expense_ids)

    def type_string(self) -> str:
        return self.group_type.value

    def debtors(self) -> list[str]:
        return [uid for uid, balance in self.member_balances.items() if balance < 0]

    def creditors(self) -> list[str]:
        return [uid for uid, balance in self.member_balances.items() if balance > 0]

    def is_balanced(self) -> bool:
        return self.total_balance() == 0.0

    def touch(self) -> None:
        self.updated_at = _now_stamp()
"""Users of the expense-sharing ledger."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now_stamp() -> str:
    return time.strftime(_TIMESTAMP_FORMAT, time.localtime())


class UserStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    SUSPENDED = "Suspended"


class Currency(Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"
    CNY = "CNY"


@dataclass
class User:
    """A person who takes part in shared expenses."""

    user_id: str
    name: str
    email: str
    phone: str = ""
    profile_picture: str = ""
    preferred_currency: Currency = Currency.USD
    status: UserStatus = UserStatus.ACTIVE
    total_balance: float = 0.0
    group_ids: list[str] = field(default_factory=list)
    friend_ids: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=_now_stamp)
    last_active: str = ""

    def __post_init__(self) -> None:
        if not self.last_active:
            self.last_active = self.created_at

    def add_group(self, group_id: str) -> None:
        if group_id not in self.group_ids:
            self.group_ids.append(group_id)

    def remove_group(self, group_id: str) -> None:
        self.group_ids = [g for g in self.group_ids if g != group_id]

    def add_friend(self, friend_id: str) -> None:
        if friend_id not in self.friend_ids:
            self.friend_ids.append(friend_id)

    def remove_friend(self, friend_id: str) -> None:
        self.friend_ids = [f for f in self.friend_ids if f != friend_id]

    def is_in_group(self, group_id: str) -> bool:
        return group_id in self.group_ids

    def is_friend(self, friend_id: str) -> bool:
        return friend_id in self.friend_ids

    def update_balance(self, amount: float) -> None:
        self.total_balance += amount

    def status_string(self) -> str:
        return self.status.value

    def currency_string(self) -> str:
        return self.preferred_currency.value

    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE
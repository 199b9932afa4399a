"""The expense-sharing ledger: users, groups, expenses, settlements and balances."""

from __future__ import annotations

import itertools
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator, TypeVar

from sysdes.splitwise.expenses import Expense, ExpenseCategory
from sysdes.splitwise.groups import Group, GroupType
from sysdes.splitwise.members import Currency, User
from sysdes.splitwise.settlements import Settlement, SettlementMethod

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_MIN_DEBT = 0.01

_T = TypeVar("_T")


class SplitwiseError(RuntimeError):
    """Raised when a ledger operation refers to something missing or not allowed."""


@dataclass
class DebtSummary:
    """An amount one member owes another within a group."""

    from_user_id: str
    to_user_id: str
    amount: float
    currency: str = "USD"


@dataclass
class GroupSummary:
    """Totals describing the state of one group."""

    group_id: str
    group_name: str
    total_expenses: float = 0.0
    total_settlements: float = 0.0
    net_balance: float = 0.0
    member_count: int = 0
    expense_count: int = 0


def _truncate(items: list[_T], limit: int) -> list[_T]:
    # A negative limit keeps everything.
    return items[:limit] if limit >= 0 else items


def _id_sequence(prefix: str) -> Iterator[str]:
    return (f"{prefix}{n}" for n in itertools.count(1))


class SplitwiseApp:
    """In-memory store of users, groups, expenses and settlements."""

    def __init__(
        self, name: str = "Splitwise", version: str = "1.0.0", default_currency: str = "USD"
    ) -> None:
        self.app_name = name
        self.version = version
        self.default_currency = default_currency
        self._users: dict[str, User] = {}
        self._groups: dict[str, Group] = {}
        self._expenses: dict[str, Expense] = {}
        self._settlements: dict[str, Settlement] = {}
        self._user_ids = _id_sequence("U")
        self._group_ids = _id_sequence("G")
        self._expense_ids = _id_sequence("E")
        self._settlement_ids = _id_sequence("S")

    # Users

    def create_user(
        self,
        name: str,
        email: str,
        phone: str = "",
        preferred_currency: Currency = Currency.USD,
    ) -> User:
        user_id = next(self._user_ids)
        user = User(user_id, name, email, phone, "", preferred_currency)
        self._users[user_id] = user
        return user

    def find_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def delete_user(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def all_users(self) -> list[User]:
        return list(self._users.values())

    def search_users(self, query: str) -> list[User]:
        """Users whose name or e-mail contains ``query``, ignoring case."""
        needle = query.lower()
        return [
            user
            for user in self._users.values()
            if needle in user.name.lower() or needle in user.email.lower()
        ]

    # Groups

    def create_group(
        self,
        name: str,
        created_by: str,
        group_type: GroupType = GroupType.OTHER,
        description: str = "",
    ) -> Group:
        self.validate_user_exists(created_by)
        group_id = next(self._group_ids)
        group = Group(group_id, name, created_by, group_type, description, self.default_currency)
        self._groups[group_id] = group
        self._users[created_by].add_group(group_id)
        return group

    def find_group(self, group_id: str) -> Group | None:
        return self._groups.get(group_id)

    def delete_group(self, group_id: str) -> bool:
        if group_id not in self._groups:
            return False
        for user in self._users.values():
            user.remove_group(group_id)
        del self._groups[group_id]
        return True

    def all_groups(self) -> list[Group]:
        return list(self._groups.values())

    def groups_for_user(self, user_id: str) -> list[Group]:
        user = self.find_user(user_id)
        if user is None:
            return []
        return [self._groups[gid] for gid in user.group_ids if gid in self._groups]

    def add_user_to_group(self, user_id: str, group_id: str) -> bool:
        self.validate_user_exists(user_id)
        self.validate_group_exists(group_id)
        self._groups[group_id].add_member(user_id)
        self._users[user_id].add_group(group_id)
        return True

    def remove_user_from_group(self, user_id: str, group_id: str) -> bool:
        user = self.find_user(user_id)
        group = self.find_group(group_id)
        if user is None or group is None:
            return False
        group.remove_member(user_id)
        user.remove_group(group_id)
        return True

    # Expenses

    def create_expense(
        self,
        description: str,
        amount: float,
        paid_by: str,
        group_id: str,
        category: ExpenseCategory = ExpenseCategory.OTHER,
    ) -> Expense:
        self.validate_user_exists(paid_by)
        self.validate_group_exists(group_id)
        if not self.is_user_in_group(paid_by, group_id):
            raise SplitwiseError("User is not a member of the group")
        expense_id = next(self._expense_ids)
        expense = Expense(expense_id, description, amount, paid_by, group_id, category)
        self._expenses[expense_id] = expense
        self._groups[group_id].add_expense(expense_id)
        return expense

    def find_expense(self, expense_id: str) -> Expense | None:
        return self._expenses.get(expense_id)

    def delete_expense(self, expense_id: str) -> bool:
        expense = self._expenses.pop(expense_id, None)
        if expense is None:
            return False
        group = self.find_group(expense.group_id)
        if group is not None:
            group.remove_expense(expense_id)
        return True

    def expenses_for_group(self, group_id: str) -> list[Expense]:
        return [e for e in self._expenses.values() if e.group_id == group_id]

    def expenses_for_user(self, user_id: str) -> list[Expense]:
        return [
            e for e in self._expenses.values() if e.paid_by == user_id or e.has_split(user_id)
        ]

    def expenses_by_category(self, group_id: str, category: ExpenseCategory) -> list[Expense]:
        return [
            e
            for e in self._expenses.values()
            if e.group_id == group_id and e.category is category
        ]

    # Settlements

    def create_settlement(
        self,
        from_user_id: str,
        to_user_id: str,
        group_id: str,
        amount: float,
        method: SettlementMethod = SettlementMethod.CASH,
    ) -> Settlement:
        self.validate_user_exists(from_user_id)
        self.validate_user_exists(to_user_id)
        self.validate_group_exists(group_id)
        settlement_id = next(self._settlement_ids)
        settlement = Settlement(
            settlement_id,
            from_user_id,
            to_user_id,
            group_id,
            amount,
            self.default_currency,
            method,
        )
        self._settlements[settlement_id] = settlement
        return settlement

    def find_settlement(self, settlement_id: str) -> Settlement | None:
        return self._settlements.get(settlement_id)

    def delete_settlement(self, settlement_id: str) -> bool:
        return self._settlements.pop(settlement_id, None) is not None

    def settlements_for_group(self, group_id: str) -> list[Settlement]:
        return [s for s in self._settlements.values() if s.group_id == group_id]

    def settlements_for_user(self, user_id: str) -> list[Settlement]:
        return [
            s
            for s in self._settlements.values()
            if s.from_user_id == user_id or s.to_user_id == user_id
        ]

    def complete_settlement(self, settlement_id: str) -> bool:
        settlement = self.find_settlement(settlement_id)
        if settlement is None or not settlement.can_be_completed():
            return False
        settlement.mark_completed()
        return True

    # Balances and debts

    def calculate_balances(self, group_id: str) -> None:
        """Recompute member balances from expenses and completed settlements."""
        group = self.find_group(group_id)
        if group is None:
            return
        group.reset_balances()
        for expense in self.expenses_for_group(group_id):
            group.update_member_balance(expense.paid_by, expense.amount)
            for split in expense.splits:
                group.update_member_balance(split.user_id, -split.amount)
        for settlement in self.settlements_for_group(group_id):
            if settlement.is_completed():
                group.update_member_balance(settlement.from_user_id, -settlement.amount)
                group.update_member_balance(settlement.to_user_id, settlement.amount)

    def debt_summary(self, group_id: str) -> list[DebtSummary]:
        """Pair every debtor with every creditor, ignoring amounts of a cent or less."""
        self.calculate_balances(group_id)
        group = self.find_group(group_id)
        if group is None:
            return []
        balances = dict(group.member_balances)
        debts = []
        for debtor, owed in balances.items():
            if owed >= 0:
                continue
            for creditor, due in balances.items():
                if due <= 0:
                    continue
                amount = min(-owed, due)
                if amount > _MIN_DEBT:
                    debts.append(DebtSummary(debtor, creditor, amount, group.currency))
        return debts

    def debt_summary_for_user(self, user_id: str) -> list[DebtSummary]:
        return [
            debt
            for group in self.groups_for_user(user_id)
            for debt in self.debt_summary(group.group_id)
            if user_id in (debt.from_user_id, debt.to_user_id)
        ]

    def user_balance(self, user_id: str, group_id: str) -> float:
        group = self.find_group(group_id)
        if group is None:
            return 0.0
        self.calculate_balances(group_id)
        return group.member_balance(user_id)

    def total_user_balance(self, user_id: str) -> float:
        return sum(
            (self.user_balance(user_id, g.group_id) for g in self.groups_for_user(user_id)),
            0.0,
        )

    # Reporting

    def group_summary(self, group_id: str) -> GroupSummary:
        group = self.find_group(group_id)
        if group is None:
            return GroupSummary("", "")
        total_expenses = sum((e.amount for e in self.expenses_for_group(group_id)), 0.0)
        total_settlements = sum(
            (s.amount for s in self.settlements_for_group(group_id) if s.is_completed()), 0.0
        )
        self.calculate_balances(group_id)
        return GroupSummary(
            group_id,
            group.name,
            total_expenses,
            total_settlements,
            group.total_balance(),
            group.member_count(),
            group.expense_count(),
        )

    def all_group_summaries(self) -> list[GroupSummary]:
        return [self.group_summary(group_id) for group_id in list(self._groups)]

    def top_expenses(self, group_id: str, limit: int = 10) -> list[Expense]:
        ranked = sorted(self.expenses_for_group(group_id), key=lambda e: e.amount, reverse=True)
        return _truncate(ranked, limit)

    def expense_breakdown(self, group_id: str) -> dict[ExpenseCategory, float]:
        breakdown: dict[ExpenseCategory, float] = defaultdict(float)
        for expense in self.expenses_for_group(group_id):
            breakdown[expense.category] += expense.amount
        return dict(breakdown)

    def top_spenders(self, group_id: str, limit: int = 5) -> list[tuple[str, float]]:
        spending: dict[str, float] = defaultdict(float)
        for expense in self.expenses_for_group(group_id):
            spending[expense.paid_by] += expense.amount
        ranked = sorted(spending.items(), key=lambda item: item[1], reverse=True)
        return _truncate(ranked, limit)

    # Utilities

    def current_timestamp(self) -> str:
        return time.strftime(_TIMESTAMP_FORMAT, time.localtime())

    def validate_user_exists(self, user_id: str) -> None:
        if self.find_user(user_id) is None:
            raise SplitwiseError(f"User not found: {user_id}")

    def validate_group_exists(self, group_id: str) -> None:
        if self.find_group(group_id) is None:
            raise SplitwiseError(f"Group not found: {group_id}")

    def validate_expense_exists(self, expense_id: str) -> None:
        if self.find_expense(expense_id) is None:
            raise SplitwiseError(f"Expense not found: {expense_id}")

    def validate_settlement_exists(self, settlement_id: str) -> None:
        if self.find_settlement(settlement_id) is None:
            raise SplitwiseError(f"Settlement not found: {settlement_id}")

    def is_user_in_group(self, user_id: str, group_id: str) -> bool:
        group = self.find_group(group_id)
        return group.has_member(user_id) if group is not None else False

    def user_count(self) -> int:
        return len(self._users)

    def group_count(self) -> int:
        return len(self._groups)

    def expense_count(self) -> int:
        return len(self._expenses)

    def settlement_count(self) -> int:
        return len(self._settlements)
from datetime import datetime, timedelta

import pytest

from sysdes.splitwise.expenses import ExpenseCategory
from sysdes.splitwise.groups import GroupType
from sysdes.splitwise.ledger import GroupSummary, SplitwiseApp, SplitwiseError
from sysdes.splitwise.members import Currency

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@pytest.fixture
def app():
    return SplitwiseApp()


@pytest.fixture
def trio(app):
    alice = app.create_user("Alice", "alice@example.com")
    bob = app.create_user("Bob", "bob@example.com")
    carol = app.create_user("Carol", "carol@example.com")
    group = app.create_group("Trip", alice.user_id, GroupType.TRIP)
    app.add_user_to_group(bob.user_id, group.group_id)
    app.add_user_to_group(carol.user_id, group.group_id)
    return app, alice, bob, carol, group


def test_defaults(app):
    assert app.app_name == "Splitwise"
    assert app.version == "1.0.0"
    assert app.default_currency == "USD"


def test_user_ids_are_sequential(app):
    first = app.create_user("A", "a@example.com")
    second = app.create_user("B", "b@example.com", "", Currency.EUR)
    assert first.user_id == "U1"
    assert second.user_id == "U2"
    assert second.preferred_currency is Currency.EUR
    assert app.user_count() == 2


def test_find_and_delete_user(app):
    user = app.create_user("A", "a@example.com")
    assert app.find_user(user.user_id) is user
    assert app.find_user("missing") is None
    assert app.delete_user(user.user_id) is True
    assert app.delete_user(user.user_id) is False
    assert app.all_users() == []


def test_search_users_case_insensitive(app):
    alice = app.create_user("Alice Smith", "alice@example.com")
    bob = app.create_user("Bob", "BOB@EXAMPLE.COM")
    assert app.search_users("SMITH") == [alice]
    assert app.search_users("bob@") == [bob]
    assert len(app.search_users("example")) == 2
    assert app.search_users("zzz") == []


def test_create_group_requires_user(app):
    with pytest.raises(SplitwiseError, match="User not found: U9"):
        app.create_group("G", "U9")


def test_create_group_links_creator(app):
    user = app.create_user("A", "a@example.com")
    group = app.create_group("Home", user.user_id, GroupType.HOUSE, "flat")
    assert group.group_id == "G1"
    assert group.has_member(user.user_id)
    assert user.is_in_group(group.group_id)
    assert group.currency == app.default_currency
    assert app.groups_for_user(user.user_id) == [group]


def test_delete_group_unlinks_users(trio):
    app, alice, bob, _, group = trio
    assert app.delete_group(group.group_id) is True
    assert not alice.is_in_group(group.group_id)
    assert not bob.is_in_group(group.group_id)
    assert app.group_count() == 0
    assert app.delete_group(group.group_id) is False


def test_add_user_to_missing_group_raises(app):
    user = app.create_user("A", "a@example.com")
    with pytest.raises(SplitwiseError, match="Group not found: G7"):
        app.add_user_to_group(user.user_id, "G7")


def test_remove_user_from_group(trio):
    app, _, bob, _, group = trio
    assert app.remove_user_from_group(bob.user_id, group.group_id) is True
    assert not group.has_member(bob.user_id)
    assert not bob.is_in_group(group.group_id)
    assert app.remove_user_from_group("nobody", group.group_id) is False


def test_create_expense_non_member_raises(app):
    alice = app.create_user("A", "a@example.com")
    outsider = app.create_user("B", "b@example.com")
    group = app.create_group("G", alice.user_id)
    with pytest.raises(SplitwiseError, match="not a member"):
        app.create_expense("Lunch", 10.0, outsider.user_id, group.group_id)


def test_create_and_delete_expense(trio):
    app, alice, _, _, group = trio
    expense = app.create_expense("Dinner", 30.0, alice.user_id, group.group_id, ExpenseCategory.FOOD)
    assert expense.expense_id == "E1"
    assert group.has_expense(expense.expense_id)
    assert app.find_expense(expense.expense_id) is expense
    assert app.delete_expense(expense.expense_id) is True
    assert not group.has_expense(expense.expense_id)
    assert app.delete_expense(expense.expense_id) is False


def test_expense_queries(trio):
    app, alice, bob, carol, group = trio
    food = app.create_expense("Dinner", 30.0, alice.user_id, group.group_id, ExpenseCategory.FOOD)
    taxi = app.create_expense("Taxi", 12.0, bob.user_id, group.group_id, ExpenseCategory.TRANSPORT)
    food.split_equally([alice.user_id, carol.user_id])
    assert app.expenses_for_group(group.group_id) == [food, taxi]
    assert app.expenses_for_user(carol.user_id) == [food]
    assert app.expenses_for_user(bob.user_id) == [taxi]
    assert app.expenses_by_category(group.group_id, ExpenseCategory.FOOD) == [food]


def test_settlement_lifecycle(trio):
    app, alice, bob, _, group = trio
    settlement = app.create_settlement(bob.user_id, alice.user_id, group.group_id, 5.0)
    assert settlement.settlement_id == "S1"
    assert settlement.currency == app.default_currency
    assert app.settlements_for_group(group.group_id) == [settlement]
    assert app.settlements_for_user(alice.user_id) == [settlement]
    assert app.complete_settlement(settlement.settlement_id) is True
    assert settlement.is_completed()
    assert app.complete_settlement(settlement.settlement_id) is False
    assert app.delete_settlement(settlement.settlement_id) is True
    assert app.find_settlement(settlement.settlement_id) is None


def test_create_settlement_requires_users(trio):
    app, alice, _, _, group = trio
    with pytest.raises(SplitwiseError):
        app.create_settlement(alice.user_id, "ghost", group.group_id, 1.0)


def test_balances_sum_to_zero(trio):
    app, alice, bob, carol, group = trio
    expense = app.create_expense("Hotel", 90.0, alice.user_id, group.group_id)
    expense.split_equally([alice.user_id, bob.user_id, carol.user_id])
    a = app.user_balance(alice.user_id, group.group_id)
    b = app.user_balance(bob.user_id, group.group_id)
    c = app.user_balance(carol.user_id, group.group_id)
    assert a == pytest.approx(expense.amount - expense.amount_for(alice.user_id))
    assert b == pytest.approx(-expense.amount_for(bob.user_id))
    assert b == pytest.approx(c)
    assert a + b + c == pytest.approx(0.0)
    assert group.debtors() == [bob.user_id, carol.user_id]
    assert group.creditors() == [alice.user_id]


def test_completed_settlement_moves_balance(trio):
    app, alice, bob, carol, group = trio
    expense = app.create_expense("Hotel", 90.0, alice.user_id, group.group_id)
    expense.split_equally([alice.user_id, bob.user_id, carol.user_id])
    before = app.user_balance(bob.user_id, group.group_id)
    settlement = app.create_settlement(bob.user_id, alice.user_id, group.group_id, 10.0)
    assert app.user_balance(bob.user_id, group.group_id) == pytest.approx(before)
    app.complete_settlement(settlement.settlement_id)
    after = app.user_balance(bob.user_id, group.group_id)
    assert after == pytest.approx(before - settlement.amount)


def test_debt_summary(trio):
    app, alice, bob, carol, group = trio
    expense = app.create_expense("Hotel", 90.0, alice.user_id, group.group_id)
    expense.split_equally([alice.user_id, bob.user_id, carol.user_id])
    debts = app.debt_summary(group.group_id)
    assert [(d.from_user_id, d.to_user_id) for d in debts] == [
        (bob.user_id, alice.user_id),
        (carol.user_id, alice.user_id),
    ]
    assert debts[0].amount == pytest.approx(expense.amount_for(bob.user_id))
    assert debts[0].currency == group.currency
    for_carol = app.debt_summary_for_user(carol.user_id)
    assert [(d.from_user_id, d.to_user_id) for d in for_carol] == [(carol.user_id, alice.user_id)]
    assert app.debt_summary("missing") == []


def test_total_user_balance_across_groups(trio):
    app, alice, bob, _, group = trio
    other = app.create_group("Home", alice.user_id)
    app.add_user_to_group(bob.user_id, other.group_id)
    e1 = app.create_expense("A", 20.0, alice.user_id, group.group_id)
    e1.split_equally([alice.user_id, bob.user_id])
    e2 = app.create_expense("B", 40.0, alice.user_id, other.group_id)
    e2.split_equally([alice.user_id, bob.user_id])
    expected = app.user_balance(alice.user_id, group.group_id) + app.user_balance(
        alice.user_id, other.group_id
    )
    assert app.total_user_balance(alice.user_id) == pytest.approx(expected)
    assert app.total_user_balance(bob.user_id) == pytest.approx(-expected)


def test_group_summary(trio):
    app, alice, bob, carol, group = trio
    app.create_expense("A", 30.0, alice.user_id, group.group_id).split_equally(
        [alice.user_id, bob.user_id, carol.user_id]
    )
    app.create_expense("B", 15.0, bob.user_id, group.group_id).split_equally(
        [alice.user_id, bob.user_id, carol.user_id]
    )
    s = app.create_settlement(carol.user_id, alice.user_id, group.group_id, 7.0)
    app.complete_settlement(s.settlement_id)
    summary = app.group_summary(group.group_id)
    assert summary.group_name == "Trip"
    assert summary.total_expenses == pytest.approx(30.0 + 15.0)
    assert summary.total_settlements == pytest.approx(7.0)
    assert summary.net_balance == pytest.approx(0.0)
    assert summary.member_count == 3
    assert summary.expense_count == 2
    assert app.all_group_summaries() == [summary]


def test_group_summary_missing(app):
    assert app.group_summary("nope") == GroupSummary("", "", 0.0, 0.0, 0.0, 0, 0)


def test_top_expenses_and_spenders(trio):
    app, alice, bob, _, group = trio
    small = app.create_expense("s", 5.0, alice.user_id, group.group_id)
    big = app.create_expense("b", 50.0, bob.user_id, group.group_id)
    mid = app.create_expense("m", 20.0, alice.user_id, group.group_id)
    assert app.top_expenses(group.group_id) == [big, mid, small]
    assert app.top_expenses(group.group_id, 2) == [big, mid]
    spenders = app.top_spenders(group.group_id)
    assert [uid for uid, _ in spenders] == [bob.user_id, alice.user_id]
    assert spenders[1][1] == pytest.approx(small.amount + mid.amount)
    assert app.top_spenders(group.group_id, 1) == [(bob.user_id, big.amount)]


def test_expense_breakdown(trio):
    app, alice, bob, _, group = trio
    a = app.create_expense("a", 10.0, alice.user_id, group.group_id, ExpenseCategory.FOOD)
    b = app.create_expense("b", 4.0, bob.user_id, group.group_id, ExpenseCategory.FOOD)
    c = app.create_expense("c", 8.0, bob.user_id, group.group_id, ExpenseCategory.TRAVEL)
    breakdown = app.expense_breakdown(group.group_id)
    assert set(breakdown) == {ExpenseCategory.FOOD, ExpenseCategory.TRAVEL}
    assert breakdown[ExpenseCategory.FOOD] == pytest.approx(a.amount + b.amount)
    assert breakdown[ExpenseCategory.TRAVEL] == pytest.approx(c.amount)


def test_validators(app):
    with pytest.raises(SplitwiseError, match="Expense not found: E1"):
        app.validate_expense_exists("E1")
    with pytest.raises(SplitwiseError, match="Settlement not found: S1"):
        app.validate_settlement_exists("S1")
    with pytest.raises(SplitwiseError, match="Group not found: G1"):
        app.validate_group_exists("G1")
    assert app.is_user_in_group("U1", "G1") is False


def test_counts(trio):
    app, alice, bob, _, group = trio
    app.create_expense("x", 1.0, alice.user_id, group.group_id)
    app.create_settlement(bob.user_id, alice.user_id, group.group_id, 1.0)
    assert app.user_count() == 3
    assert app.group_count() == 1
    assert app.expense_count() == 1
    assert app.settlement_count() == 1


def test_current_timestamp_is_local_now(app):
    before = datetime.now().replace(microsecond=0)
    stamp = app.current_timestamp()
    after = datetime.now()
    parsed = datetime.strptime(stamp, TIMESTAMP_FORMAT)
    assert before <= parsed <= after
    assert after - parsed < timedelta(seconds=5)
    assert len(stamp) == 19
from datetime import datetime

import pytest

from sysdes.splitwise.groups import Group, GroupType


@pytest.fixture
def group():
    return Group("G1", "Trip", "U1", GroupType.TRIP)


def test_creator_is_first_member(group):
    assert group.member_ids == ["U1"]
    assert group.member_balance("U1") == 0.0
    assert group.member_count() == 1
    assert group.is_active is True
    assert group.currency == "USD"
    assert group.updated_at == group.created_at


def test_add_member_is_idempotent(group):
    group.add_member("U2")
    group.add_member("U2")
    assert group.member_ids == ["U1", "U2"]
    assert group.member_count() == 2


def test_remove_member_drops_balance(group):
    group.add_member("U2")
    group.update_member_balance("U2", 5.0)
    group.remove_member("U2")
    assert not group.has_member("U2")
    assert "U2" not in group.member_balances
    assert group.member_balance("U2") == 0.0


def test_non_member_balance_is_ignored(group):
    group.update_member_balance("U9", 10.0)
    assert group.member_balance("U9") == 0.0
    assert "U9" not in group.member_balances


def test_balances_debtors_creditors(group):
    group.add_member("U2")
    group.add_member("U3")
    group.update_member_balance("U1", 30.0)
    group.update_member_balance("U2", -30.0)
    assert group.creditors() == ["U1"]
    assert group.debtors() == ["U2"]
    assert group.is_balanced()
    assert group.total_balance() == 0.0


def test_unbalanced_group(group):
    group.update_member_balance("U1", 2.5)
    assert not group.is_balanced()
    assert group.total_balance() == group.member_balance("U1")


def test_reset_balances(group):
    group.add_member("U2")
    group.update_member_balance("U1", 3.0)
    group.update_member_balance("U2", -1.0)
    group.reset_balances()
    assert all(balance == 0.0 for balance in group.member_balances.values())
    assert group.debtors() == [] and group.creditors() == []


def test_expenses(group):
    group.add_expense("E1")
    group.add_expense("E1")
    group.add_expense("E2")
    assert group.expense_ids == ["E1", "E2"]
    assert group.expense_count() == 2
    assert group.has_expense("E2")
    group.remove_expense("E1")
    assert not group.has_expense("E1")
    assert group.expense_count() == 1


@pytest.mark.parametrize(
    "group_type, label",
    [
        (GroupType.TRIP, "Trip"),
        (GroupType.HOUSE, "House"),
        (GroupType.COUPLE, "Couple"),
        (GroupType.EVENT, "Event"),
        (GroupType.PROJECT, "Project"),
        (GroupType.OTHER, "Other"),
    ],
)
def test_type_strings(group_type, label):
    assert Group("G2", "x", "U1", group_type).type_string() == label


def test_default_type_is_other():
    assert Group("G3", "x", "U1").type_string() == "Other"


def test_touch_sets_timestamp(group):
    group.updated_at = ""
    group.touch()
    parsed = datetime.strptime(group.updated_at, "%Y-%m-%d %H:%M:%S")
    assert parsed.strftime("%Y-%m-%d %H:%M:%S") == group.updated_at
"""Shared-expense ledger: users, groups, expenses, settlements and balances."""
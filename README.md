# sysdes

A small collection of in-memory system-design building blocks:

- **`sysdes.splitwise`**: a shared-expense ledger with users, groups, expenses
  split equally, by percentage, by shares or by custom amounts, settlements,
  balances, debt summaries and simple reports.
- **`sysdes.shortener`**: a URL shortener with short-code generation, custom
  codes, expiry, user accounts and click analytics.
- **`sysdes.server`**: a minimal HTTP server that answers `GET /` with a
  greeting.

Only the standard library is used.

## Installation

```console
pip install .
```

To run the test suite:

```console
pip install ".[test]"
pytest
```

## Splitting expenses

```python
from sysdes.splitwise.ledger import SplitwiseApp
from sysdes.splitwise.groups import GroupType
from sysdes.splitwise.expenses import ExpenseCategory

app = SplitwiseApp()

alice = app.create_user("Alice", "alice@example.com")
bob = app.create_user("Bob", "bob@example.com")

trip = app.create_group("Weekend trip", alice.user_id, GroupType.TRIP)
app.add_user_to_group(bob.user_id, trip.group_id)

dinner = app.create_expense("Dinner", 60.0, alice.user_id, trip.group_id,
                            ExpenseCategory.FOOD)
dinner.split_equally([alice.user_id, bob.user_id])

for debt in app.debt_summary(trip.group_id):
    print(debt.from_user_id, "owes", debt.to_user_id, debt.amount)
# U2 owes U1 30.0

print(app.user_balance(bob.user_id, trip.group_id))   # -30.0
```

Identifiers are handed out in sequence: users `U1`, `U2`, …, groups `G1`, …,
expenses `E1`, … and settlements `S1`, …. Creating a group, expense or
settlement, or adding a user to a group, raises `SplitwiseError` when the user
or group it names does not exist; `create_expense` also raises it when the
payer is not a member of the group. Uneven splits raise `ValueError` when the
lists of users and percentages or shares differ in length.

Balances are recomputed from the group's expenses each time they are asked
for: the payer is credited with the full amount and each split is debited from
its user. Settlements start out pending (`create_settlement`) and only count
once completed (`complete_settlement`); a completed settlement is then taken
off the payer's balance and added to the recipient's.

`debt_summary` pairs every member with a negative balance against every member
with a positive one, listing the smaller of the two amounts when it is above
one cent. Reports include `group_summary`, `all_group_summaries`,
`top_expenses`, `expense_breakdown` and `top_spenders`.

## Shortening URLs

```python
from sysdes.shortener.shortener import ShortenRequest, URLShortener

shortener = URLShortener("http://short.url")

response = shortener.shorten_url("example.com/some/page")
if response.success:
    print(response.short_url)          # http://short.url/<6-character code>

print(shortener.expand_url(response.short_code, "203.0.113.7"))
# http://example.com/some/page

custom = shortener.shorten(ShortenRequest("https://example.com/docs",
                                          custom_code="docs",
                                          expiration_days=30))
print(custom.short_url)                # http://short.url/docs
```

Addresses without a scheme get `http://`, and one trailing slash is dropped.
Short codes are six characters drawn from letters and digits; a custom code of
up to twenty such characters may be requested. Links expire a year after
creation unless another lifetime is given. A failed request returns a
`ShortenResponse` with `success` false and a `message` saying why.

`expand_url` returns `None` for a link that is unknown, inactive or expired.
Each successful expansion counts a click, and expansions that carry an IP
address are also recorded in the analytics (`url_analytics`, `top_urls`,
`clicks_by_country`, `clicks_by_device`).

Accounts are created with `create_user(username, email, password)`; the
password is stored as a SHA-256 digest and checked by `authenticate_user`.
`delete_url` refuses to remove a link when a user id is given that is not the
link's creator.

## Running the greeting server

```console
sysdes-server --host 127.0.0.1 --port 3013
```

By default the server listens on `0.0.0.0`, port 3013. It replies to `GET /`
with a short plain-text greeting and to every other path with 404.
`sysdes.server.create_server(host, port)` builds the same server for use from
code.

## What it does not do

- Nothing is persisted: the ledger, links, accounts and click data live only
  in the memory of the running process.
- The HTTP server only serves the greeting; neither the ledger nor the URL
  shortener is exposed over HTTP, and there is no redirect endpoint for short
  links.
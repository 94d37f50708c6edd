"""
Purpose: Rebuilds logical accounts from the flat, denormalised client list.
What it does:

- derives an identity key per row (pluggable strategy, see identity.py)
- groups rows by key, keeping the order keys were first seen
- names each account after its first company, else first client name,
  else "My Properties"
- collects member property ids in encounter order (no duplicates)

Rows without a key are dropped here; the caller decides whether to log them.

Rule: Pure function. Same rows in any order -> same accounts and memberships.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .identity import IdentityKeyStrategy, name_identity_key
from .models import DEFAULT_ACCOUNT_NAME, Account, PropertyRecord

PropertyRow = Union[PropertyRecord, Mapping[str, Any]]


def to_property_record(row: PropertyRow) -> PropertyRecord:
    if isinstance(row, PropertyRecord):
        return row
    return PropertyRecord.from_row(row)


def group_into_accounts(
    rows: Sequence[PropertyRow],
    identity_key: IdentityKeyStrategy = name_identity_key,
) -> List[Account]:
    """
    Main grouping entry point.

    Parameters
    ----------
    rows:
        Property rows, raw mappings or already parsed PropertyRecords.
    identity_key:
        PropertyRecord -> Optional[str]. Defaults to the name heuristic.

    Returns
    -------
    Accounts in first-seen key order.
    """
    grouped: Dict[str, Account] = {}
    # Display names are filled in from the first member that provides them.
    companies: Dict[str, Optional[str]] = {}
    client_names: Dict[str, Optional[str]] = {}

    for row in rows or []:
        record = to_property_record(row)
        key = identity_key(record)
        if not key:
            continue

        account = grouped.get(key)
        if account is None:
            account = Account(account_id=key, name=DEFAULT_ACCOUNT_NAME)
            grouped[key] = account
            companies[key] = None
            client_names[key] = None

        if companies[key] is None and record.company:
            companies[key] = record.company
        if client_names[key] is None and record.client_name:
            client_names[key] = record.client_name

        account.add_property(record.property_id)

    for key, account in grouped.items():
        account.name = companies[key] or client_names[key] or DEFAULT_ACCOUNT_NAME

    return list(grouped.values())


def dropped_rows(
    rows: Sequence[PropertyRow],
    identity_key: IdentityKeyStrategy = name_identity_key,
) -> List[PropertyRecord]:
    """
    The rows group_into_accounts would silently skip, for data-quality reporting.
    """
    records = [to_property_record(row) for row in rows or []]
    return [record for record in records if not identity_key(record)]


def account_for_property(accounts: Sequence[Account], property_id: str) -> Optional[Account]:
    for account in accounts:
        if property_id in account.property_ids:
            return account
    return None

import math
import random

import pytest

from accounts.aggregator import account_for_property, dropped_rows, group_into_accounts
from accounts.identity import account_id_identity_key, name_identity_key
from accounts.models import PropertyRecord, clean_text, normalise_address


@pytest.fixture
def client_rows():
    return [
        {"property_id": "p1", "client_name": "Jane Doe", "company": "", "address": "1 Oak St"},
        {"property_id": "p2", "client_name": "", "company": "Acme", "address": "2 Oak St"},
        {"property_id": "p3", "client_name": "Acme", "company": "", "address": "3 Oak St"},
        {"property_id": "p4", "client_name": "Jane Doe", "company": "Doe Holdings", "address": "4 Oak St"},
        {"property_id": "p5", "client_name": "", "company": "", "address": "5 Oak St"},
        {"property_id": "p6", "client_name": "  ", "company": None, "address": "6 Oak St"},
    ]


def _memberships(accounts):
    return {frozenset(account.property_ids) for account in accounts}


def test_company_and_client_name_fallback_merge(client_rows):
    """
    company-only and client_name-only rows with the same value land in one
    account; a row with neither forms its own singleton keyed by property id.
    """
    accounts = group_into_accounts(client_rows)
    by_id = {account.account_id: account for account in accounts}

    assert by_id["Acme"].property_ids == ["p2", "p3"]
    assert by_id["p5"].property_ids == ["p5"]
    assert by_id["p6"].property_ids == ["p6"]


def test_keys_keep_first_seen_order(client_rows):
    accounts = group_into_accounts(client_rows)

    assert [account.account_id for account in accounts] == ["Jane Doe", "Acme", "p5", "p6"]
    assert accounts[0].property_ids == ["p1", "p4"]


def test_display_names(client_rows):
    accounts = {account.account_id: account for account in group_into_accounts(client_rows)}

    # 1. A company anywhere in the group wins over the client name
    assert accounts["Jane Doe"].name == "Doe Holdings"
    # 2. Company only
    assert accounts["Acme"].name == "Acme"
    # 3. Neither -> placeholder
    assert accounts["p5"].name == "My Properties"


def test_grouping_is_idempotent_under_reordering(client_rows):
    expected = _memberships(group_into_accounts(client_rows))

    for seed in range(10):
        shuffled = list(client_rows)
        random.Random(seed).shuffle(shuffled)
        assert _memberships(group_into_accounts(shuffled)) == expected

    # Re-running on the same input is stable too
    assert _memberships(group_into_accounts(client_rows)) == expected


def test_rows_without_any_identity_are_dropped():
    rows = [
        {"property_id": "", "client_name": "", "company": ""},
        {"property_id": None, "client_name": None, "company": None},
        {"property_id": "p1", "client_name": "", "company": ""},
    ]

    accounts = group_into_accounts(rows)

    assert [account.property_ids for account in accounts] == [["p1"]]
    assert len(dropped_rows(rows)) == 2


def test_duplicate_property_ids_are_listed_once():
    rows = [
        {"property_id": "p1", "client_name": "Sam"},
        {"property_id": "p1", "client_name": "Sam"},
        {"property_id": "p2", "client_name": "Sam"},
    ]

    assert group_into_accounts(rows)[0].property_ids == ["p1", "p2"]


def test_account_id_strategy_uses_the_explicit_column():
    rows = [
        {"property_id": "p1", "account_id": "acc-9", "client_name": "Sam Kim"},
        {"property_id": "p2", "account_id": "acc-9", "client_name": "Samuel Kim"},
        {"property_id": "p3", "account_id": "", "client_name": "Sam Kim"},
    ]

    by_name = group_into_accounts(rows, identity_key=name_identity_key)
    by_account = group_into_accounts(rows, identity_key=account_id_identity_key)

    assert _memberships(by_name) == {frozenset({"p1", "p3"}), frozenset({"p2"})}
    assert _memberships(by_account) == {frozenset({"p1", "p2"}), frozenset({"p3"})}


def test_custom_strategy_can_be_swapped_in():
    rows = [{"property_id": "p1", "client_name": "A"}, {"property_id": "p2", "client_name": "B"}]

    accounts = group_into_accounts(rows, identity_key=lambda record: "everyone")

    assert [account.property_ids for account in accounts] == [["p1", "p2"]]


def test_accepts_parsed_records_and_nan_cells():
    records = [
        PropertyRecord.from_row({"property_id": 101.0, "client_name": math.nan, "company": "Acme"}),
        {"property_id": "102", "client_name": "Acme", "company": math.nan},
    ]

    accounts = group_into_accounts(records)

    assert accounts[0].property_ids == ["101", "102"]
    assert account_for_property(accounts, "102") is accounts[0]
    assert account_for_property(accounts, "999") is None


def test_cell_helpers():
    assert clean_text("  x ") == "x"
    assert clean_text("") is None
    assert clean_text(math.nan) is None
    assert clean_text(12) == "12"
    assert clean_text(False) is None
    assert normalise_address("  12  Oak   St, MANLY ") == "12 oak st, manly"
    assert normalise_address(None) == ""

"""
Accounts domain package.

Public API:
- Domain models: PropertyRecord, Account
- Grouping entry: group_into_accounts
- Identity strategies: name_identity_key, account_id_identity_key
"""
from .models import Account, PropertyRecord, clean_text, normalise_address, normalise_identifier
from .identity import IdentityKeyStrategy, account_id_identity_key, name_identity_key
from .aggregator import account_for_property, dropped_rows, group_into_accounts

__all__ = [
    "Account",
    "PropertyRecord",
    "clean_text",
    "normalise_address",
    "normalise_identifier",
    "IdentityKeyStrategy",
    "account_id_identity_key",
    "name_identity_key",
    "account_for_property",
    "dropped_rows",
    "group_into_accounts",
]

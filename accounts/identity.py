"""
Purpose: Identity-key strategies for grouping property rows into accounts.
What it does:
Each strategy maps a PropertyRecord to the key its account is grouped under,
or None when the row cannot be grouped at all.

- name_identity_key: client name -> company -> property id (the heuristic
  the client list has always used; can merge namesakes or split customers who
  fill name/company inconsistently).
- account_id_identity_key: explicit account_id column -> property id.

Swap the strategy passed to group_into_accounts once account_id is reliably
populated; the grouping algorithm does not change.
"""

from __future__ import annotations

from typing import Callable, Optional

from .models import PropertyRecord

IdentityKeyStrategy = Callable[[PropertyRecord], Optional[str]]


def name_identity_key(record: PropertyRecord) -> Optional[str]:
    return record.client_name or record.company or record.property_id


def account_id_identity_key(record: PropertyRecord) -> Optional[str]:
    return record.account_id or record.property_id

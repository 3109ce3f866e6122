from __future__ import annotations

from typing import Any, Dict, Optional

from auraconnect.errors import Unauthorized, ValidationError
from auraconnect.store import CredentialStore


PLANS = ("starter", "pro", "enterprise")


def _debug(msg: str) -> None:
    print(f"[subscriptions] {msg}")


def subscribe(store: CredentialStore, *, user_id: int, plan: str | None) -> str:
    """Set the user's plan, replacing any previous one. Returns the plan."""
    if not plan or plan not in PLANS:
        raise ValidationError("Invalid plan selected.")
    # The token can outlive its user row; subscriptions.user_id is a foreign key.
    if store.find_user_by_id(int(user_id)) is None:
        raise Unauthorized("User not found.")
    store.upsert_subscription(int(user_id), plan)
    _debug(f"user_id={user_id} plan={plan}")
    return plan


def current_subscription(store: CredentialStore, *, user_id: int) -> Optional[Dict[str, Any]]:
    row = store.get_subscription(int(user_id))
    if row is None:
        return None
    return {"plan": row["plan"], "created_at": row["created_at"]}

# caseguard/core/rbac.py
from __future__ import annotations

from typing import Mapping, Set


class Forbidden(Exception):
    """Raised when actor role is not allowed for an operation."""
    pass


# MVP roles (stringly-typed on purpose; later replace with Enum/JWT claims)
# Keep permissions stable even if role names evolve.
ALLOW: Mapping[str, Set[str]] = {
    # ---- Customers ----
    "customer.create": {"system", "agent", "supervisor"},
    "customer.read": {"system", "agent", "supervisor", "viewer"},

    # ---- Cases ----
    "case.create": {"system", "agent", "supervisor"},
    # The record store checks this on every query, including the
    # uniqueness lookup that runs before a create.
    "case.read": {"system", "agent", "supervisor", "viewer"},
    "case.resolve": {"agent", "supervisor"},
    "case.cancel": {"supervisor"},
}


def ensure_allowed(permission: str, role: str) -> None:
    allowed = ALLOW.get(permission, set())
    if role not in allowed:
        raise Forbidden(f"Role '{role}' is not allowed for '{permission}'")

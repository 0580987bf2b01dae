"""
Identity helpers for the Kickabout Teams application.

The owner id is opaque: it only scopes store calls. Every mutating operation
needs one, and its absence blocks the operation before any store is touched.
"""
from typing import Optional, Protocol

from .errors import MissingIdentityError


class IdentityProvider(Protocol):
    """Supplies the current owner id - supports DIP."""

    def current_owner_id(self) -> Optional[str]:
        """Return the signed-in owner id, or None."""
        ...


class StaticIdentityProvider:
    """Identity provider returning a fixed owner id."""

    def __init__(self, owner_id: Optional[str] = None):
        self.owner_id = owner_id

    def current_owner_id(self) -> Optional[str]:
        return self.owner_id


def normalize_owner_id(owner_id: Optional[str]) -> Optional[str]:
    """Strip an owner id, mapping blank values to None."""
    if owner_id is None:
        return None
    owner_id = str(owner_id).strip()
    return owner_id or None


def require_owner(owner_id: Optional[str]) -> str:
    """
    Ensure an owner id is present.

    Args:
        owner_id: Candidate owner id

    Returns:
        The normalized owner id

    Raises:
        MissingIdentityError: If no owner is signed in
    """
    owner_id = normalize_owner_id(owner_id)
    if owner_id is None:
        raise MissingIdentityError("Sign in to manage the squad")
    return owner_id

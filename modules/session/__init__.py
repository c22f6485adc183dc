"""
Session module.

Identity state for a client session: follows auth changes, keeps the
principal's profile live and exposes it as a stream of snapshots.

Public API:
- SessionContext: Lifecycle-managed identity state
- SessionSnapshot: Immutable state value
- fixed_identity: Auth source bound to one identity
"""

from .context import SessionContext, fixed_identity
from .models import SessionSnapshot
from .exceptions import IdentityResolutionTimeoutError, SessionClosedError

__all__ = [
    "SessionContext",
    "fixed_identity",
    "SessionSnapshot",
    "IdentityResolutionTimeoutError",
    "SessionClosedError",
]

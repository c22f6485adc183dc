"""
Optimistic update helper.

Applies a local mutation immediately, confirms it against the Remote Data
Gateway and, when the remote write is rejected, applies the exact inverse
local mutation. Only one mutation of a given kind may be pending per
entity; a second attempt is refused until the first one resolves.

The in-flight registry is a UI affordance, not a correctness guarantee:
the remote store is not transactional across the apply/confirm window.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from .exceptions import BloggazersError, ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationInFlightError(ConflictError):
    """Raised when the same kind of mutation is already pending for an entity."""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(
            f"A '{kind}' update is already in progress for {entity_id}",
            code="MUTATION_IN_FLIGHT",
            details={"kind": kind, "entity_id": entity_id},
        )


class MutationRejectedError(BloggazersError):
    """Raised when the remote write fails; local state has been reverted."""

    def __init__(self, kind: str, entity_id: str, reason: str):
        super().__init__(
            f"Could not save '{kind}' for {entity_id}: {reason}",
            code="MUTATION_REJECTED",
            details={"kind": kind, "entity_id": entity_id, "reason": reason},
        )


class OptimisticUpdater:
    """
    Runs optimistic mutations and tracks which ones are in flight.

    Usage:
        updater = OptimisticUpdater()
        await updater.run(
            "like", post.id,
            apply=lambda: post.likes.append(user_id),
            commit=lambda: posts.toggle_like(post.id, user_id, liked=False),
            revert=lambda: post.likes.remove(user_id),
        )
    """

    def __init__(self) -> None:
        self._in_flight: set[tuple[str, str]] = set()

    def is_in_flight(self, kind: str, entity_id: str) -> bool:
        """Whether a mutation of this kind is pending for the entity."""
        return (kind, entity_id) in self._in_flight

    @property
    def pending(self) -> frozenset[tuple[str, str]]:
        return frozenset(self._in_flight)

    async def run(
        self,
        kind: str,
        entity_id: str,
        apply: Callable[[], None],
        commit: Callable[[], Awaitable[T]],
        revert: Callable[[], None],
    ) -> T:
        """
        Apply locally, commit remotely, revert on failure.

        Raises:
            MutationInFlightError: If the same mutation is already pending
            MutationRejectedError: If the commit failed (local state reverted)
        """
        key = (kind, entity_id)
        if key in self._in_flight:
            raise MutationInFlightError(kind, entity_id)

        self._in_flight.add(key)
        try:
            apply()
            try:
                return await commit()
            except Exception as e:
                logger.warning(
                    "Remote '%s' update failed for %s, reverting: %s", kind, entity_id, e
                )
                revert()
                raise MutationRejectedError(kind, entity_id, str(e)) from e
        finally:
            self._in_flight.discard(key)

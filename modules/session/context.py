"""
Session context: the identity state of one client session.

Follows the identity provider's auth state, keeps a live subscription to
the signed-in principal's profile document and publishes SessionSnapshot
values to its listeners. A first sign-in without a profile document
creates the default PENDING principal.

Usage:
    async with SessionContext(gateway, profiles) as session:
        snapshot = await session.wait_until_resolved()
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional

from modules.gateway import USERS, Document, IDocumentGateway, Unsubscribe
from modules.profiles.interfaces import IProfileService
from modules.profiles.models import Principal
from shared.config import Settings, get_settings
from shared.models import Identity

from .exceptions import IdentityResolutionTimeoutError, SessionClosedError
from .models import SessionSnapshot

logger = logging.getLogger(__name__)

IdentityCallback = Callable[[Optional[Identity]], None]
AuthSource = Callable[[IdentityCallback], Unsubscribe]
SnapshotListener = Callable[[SessionSnapshot], None]


def fixed_identity(identity: Optional[Identity]) -> AuthSource:
    """Auth source that reports one identity and never changes."""

    def subscribe(callback: IdentityCallback) -> Unsubscribe:
        callback(identity)
        return lambda: None

    return subscribe


class SessionContext:
    """
    Explicitly constructed identity state with a start/close lifecycle.

    By default the context follows the gateway's auth state; pass
    auth_source to bind it to another source (e.g. an already verified
    bearer token).
    """

    def __init__(
        self,
        gateway: IDocumentGateway,
        profiles: IProfileService,
        settings: Optional[Settings] = None,
        auth_source: Optional[AuthSource] = None,
    ):
        self._gateway = gateway
        self._profiles = profiles
        self._settings = settings or get_settings()
        self._auth_source = auth_source or gateway.subscribe_to_auth_state

        self._snapshot = SessionSnapshot.initial()
        self._identity: Optional[Identity] = None
        self._listeners: dict[int, SnapshotListener] = {}
        self._next_token = 0

        self._auth_unsubscribe: Optional[Unsubscribe] = None
        self._principal_unsubscribe: Optional[Unsubscribe] = None
        self._tasks: set[asyncio.Task] = set()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._resolved = asyncio.Event()
        self._started = False
        self._closed = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> "SessionContext":
        if self._closed:
            raise SessionClosedError()
        if not self._started:
            self._started = True
            self._loop = asyncio.get_running_loop()
            self._auth_unsubscribe = self._auth_source(self._on_auth_state)
        return self

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._auth_unsubscribe is not None:
            self._auth_unsubscribe()
            self._auth_unsubscribe = None
        self._release_principal_subscription()
        self._listeners.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def __aenter__(self) -> "SessionContext":
        return await self.start()

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Snapshot stream
    # -------------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Unsubscribe:
        """Register a listener; it receives the current snapshot immediately."""
        if self._closed:
            raise SessionClosedError()
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = listener
        listener(self._snapshot)

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    async def wait_until_resolved(self, timeout: Optional[float] = None) -> SessionSnapshot:
        """
        Wait for the first identity resolution.

        Raises:
            IdentityResolutionTimeoutError: If still loading after timeout seconds
        """
        if not self._snapshot.loading:
            return self._snapshot
        if timeout is None:
            timeout = self._settings.identity_resolution_timeout
        try:
            await asyncio.wait_for(self._resolved.wait(), timeout)
        except asyncio.TimeoutError:
            raise IdentityResolutionTimeoutError(timeout) from None
        return self._snapshot

    def _publish(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        if not snapshot.loading:
            self._resolved.set()
        for listener in list(self._listeners.values()):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener raised")

    # -------------------------------------------------------------------------
    # Identity and principal tracking
    # -------------------------------------------------------------------------

    def _release_principal_subscription(self) -> None:
        if self._principal_unsubscribe is not None:
            self._principal_unsubscribe()
            self._principal_unsubscribe = None

    def _on_auth_state(self, identity: Optional[Identity]) -> None:
        if self._closed:
            return
        previous = self._identity
        if identity is not None and previous is not None and identity.id == previous.id:
            # Token refresh for the same user
            self._identity = identity
            return

        self._release_principal_subscription()
        self._identity = identity
        if identity is None:
            self._publish(SessionSnapshot.signed_out())
            return

        self._principal_unsubscribe = self._gateway.subscribe_to_document(
            USERS,
            identity.id,
            lambda document: self._on_principal_document(identity, document),
            on_error=lambda error: self._on_principal_error(identity, error),
        )

    def _is_current(self, identity: Identity) -> bool:
        return not self._closed and self._identity is not None and self._identity.id == identity.id

    def _on_principal_document(self, identity: Identity, document: Optional[Document]) -> None:
        if not self._is_current(identity):
            return
        if document is None:
            self._schedule(self._create_default_principal(identity))
            return
        self._publish(SessionSnapshot.resolved(Principal(**document)))

    def _on_principal_error(self, identity: Identity, error: Exception) -> None:
        if not self._is_current(identity):
            return
        logger.error(f"Profile subscription failed for user {identity.id}: {error}")
        self._publish(SessionSnapshot.resolved(self._snapshot.principal))

    async def _create_default_principal(self, identity: Identity) -> None:
        try:
            principal = await self._profiles.ensure_principal(identity)
        except Exception as e:
            self._on_principal_error(identity, e)
            return
        # The document listener usually resolves first
        current = self._snapshot.principal
        if self._is_current(identity) and (current is None or current.id != identity.id):
            self._publish(SessionSnapshot.resolved(principal))

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def refresh(self) -> SessionSnapshot:
        """Re-read the principal document of the current identity."""
        if self._closed:
            raise SessionClosedError()
        identity = self._identity
        if identity is None:
            return self._snapshot
        document = await self._gateway.get_document(USERS, identity.id)
        if document is None:
            await self._create_default_principal(identity)
        elif self._is_current(identity):
            self._publish(SessionSnapshot.resolved(Principal(**document)))
        return self._snapshot

    async def sign_out(self) -> None:
        if self._closed:
            raise SessionClosedError()
        await self._gateway.sign_out()

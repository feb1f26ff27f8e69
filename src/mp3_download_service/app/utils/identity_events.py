from typing import Callable

import structlog
from mp3_download_service.domain.models.commons.enums import AUTH_EVENT
from mp3_download_service.domain.models.identity import Identity, IdentityChange

logger = structlog.get_logger(__name__)

IdentityListener = Callable[[IdentityChange], None]


class IdentityEvents:
    """Fan out identity changes (sign-up, sign-in, sign-out) to subscribers."""

    def __init__(self) -> None:
        self._listeners: list[IdentityListener] = []

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register `listener` and return the function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: AUTH_EVENT, identity: Identity | None) -> None:
        """Notify every current subscriber of an identity change."""
        change = IdentityChange(event=event, identity=identity)
        for listener in list(self._listeners):
            listener(change)


def log_identity_change(change: IdentityChange) -> None:
    """Subscriber used by the application to trace sign-ins and sign-outs."""
    logger.info(
        "Identity changed",
        auth_event=change.event.value,
        uid=change.identity.uid if change.identity else None,
    )


identity_events = IdentityEvents()

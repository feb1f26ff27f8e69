from mp3_download_service.app.utils.identity_events import IdentityEvents
from mp3_download_service.domain.models.commons.enums import AUTH_EVENT
from mp3_download_service.domain.models.identity import Identity


def test_subscribers_receive_changes_until_they_unsubscribe():
    events = IdentityEvents()
    first, second = [], []
    unsubscribe_first = events.subscribe(first.append)
    events.subscribe(second.append)
    identity = Identity(uid="u1", email="u1@example.com")

    events.publish(AUTH_EVENT.SIGNED_IN, identity)
    unsubscribe_first()
    events.publish(AUTH_EVENT.SIGNED_OUT, identity)

    assert [c.event for c in first] == [AUTH_EVENT.SIGNED_IN]
    assert [c.event for c in second] == [AUTH_EVENT.SIGNED_IN, AUTH_EVENT.SIGNED_OUT]
    assert second[0].identity == identity


def test_unsubscribe_twice_is_harmless():
    events = IdentityEvents()
    unsubscribe = events.subscribe(lambda change: None)

    unsubscribe()
    unsubscribe()

    events.publish(AUTH_EVENT.SIGNED_OUT, None)

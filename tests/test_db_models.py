from typing import Any

import pytest
from sqlalchemy.exc import IntegrityError

from chatline.models import Profile, ProfileMessage
from tests.conftest import MESSAGE_TIME


def _message(profile: Profile, message_id: str) -> ProfileMessage:
    return ProfileMessage(
        profile_id=profile.id,
        message_id=message_id,
        sender="bob",
        recipient="alice",
        content="hi",
        timestamp=MESSAGE_TIME,
    )


def test_message_id_unique_per_log(db_session: Any, alice: Profile, bob: Profile) -> None:
    """The same message id may live once in each log, never twice in one."""
    db_session.add_all([_message(alice, "m1"), _message(bob, "m1")])
    db_session.commit()

    db_session.add(_message(alice, "m1"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_messages_ordered_by_append(db_session: Any, alice: Profile) -> None:
    for message_id in ("m2", "m1", "m3"):
        db_session.add(_message(alice, message_id))
        db_session.commit()
    db_session.expire(alice, ["messages"])

    assert [m.message_id for m in alice.messages] == ["m2", "m1", "m3"]
    assert alice.find_message("m1") is not None
    assert alice.find_message("missing") is None
    assert alice.messages[0].seen is False

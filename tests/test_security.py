from chatline.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip() -> None:
    """A stored hash verifies its own password and nothing else."""
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed) is True
    assert verify_password("other", hashed) is False


def test_verify_password_rejects_malformed_hash() -> None:
    assert verify_password("s3cret", "not-a-bcrypt-hash") is False


def test_access_token_subject() -> None:
    token = create_access_token("acct-1", {"email": "a@x.com"})
    assert decode_access_token(token) == "acct-1"


def test_decode_rejects_garbage() -> None:
    assert decode_access_token("garbage") is None

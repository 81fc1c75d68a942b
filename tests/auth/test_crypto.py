import pytest  # type: ignore[import-not-found]

from blogdesk.auth.crypto import (
    MIN_ITERATIONS,
    hash_password,
    hash_session_token,
    new_session_token,
    verify_password,
)


def test_hash_then_verify_roundtrip() -> None:
    encoded = hash_password("Secure123", iterations=MIN_ITERATIONS)
    assert verify_password("Secure123", encoded)


def test_verify_rejects_other_password() -> None:
    encoded = hash_password("Secure123", iterations=MIN_ITERATIONS)
    assert not verify_password("Secure124", encoded)
    assert not verify_password("secure123", encoded)


def test_hash_uses_fresh_salt_every_call() -> None:
    a = hash_password("Secure123", iterations=MIN_ITERATIONS)
    b = hash_password("Secure123", iterations=MIN_ITERATIONS)
    assert a != b
    assert a.split("$")[2] != b.split("$")[2]


def test_hash_encodes_scheme_and_parameters() -> None:
    scheme, iters, salt, digest = hash_password("Secure123", iterations=MIN_ITERATIONS).split("$")
    assert scheme == "pbkdf2_sha256"
    assert int(iters) == MIN_ITERATIONS
    assert salt and digest


def test_hash_rejects_weak_work_factor_and_empty_password() -> None:
    with pytest.raises(ValueError):
        hash_password("Secure123", iterations=1_000)
    with pytest.raises(ValueError):
        hash_password("")


@pytest.mark.parametrize(
    "encoded",
    [
        "",
        "garbage",
        "bcrypt$12$abc$def",
        "pbkdf2_sha256$notanumber$c2FsdA$aGFzaA",
        "pbkdf2_sha256$100000$$",
        "pbkdf2_sha256$100000$!!!$???",
        "pbkdf2_sha256$-5$c2FsdA$aGFzaA",
    ],
)
def test_verify_returns_false_for_malformed_hash(encoded: str) -> None:
    assert verify_password("Secure123", encoded) is False


def test_session_tokens_are_urlsafe_and_unique() -> None:
    tokens = {new_session_token() for _ in range(50)}
    assert len(tokens) == 50
    for t in tokens:
        # 32 random bytes -> 43 base64url characters without padding.
        assert len(t) == 43
        assert all(c.isalnum() or c in "-_" for c in t)


def test_session_token_hash_is_stable_hex() -> None:
    h = hash_session_token("tok123")
    assert h == hash_session_token("tok123")
    assert len(h) == 64
    int(h, 16)

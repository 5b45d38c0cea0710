"""
tests/test_passwords.py -- Unit tests for bcrypt hashing in auth.passwords.

Coverage:
  - verify(p, hash(p)) holds across supported cost factors
  - verify(p2, hash(p1)) is False for p1 != p2
  - Salting: two hashes of one password differ, both verify
  - Cost factor encoded in the hash output
  - Malformed stored hash is a mismatch, not an exception
  - Multi-byte input beyond bcrypt's 72-byte limit still hashes and verifies
"""

from __future__ import annotations

import pytest

from auth.passwords import PasswordHasher, hash_password, verify_password


@pytest.mark.parametrize("rounds", [4, 5, 6])
@pytest.mark.parametrize("password", ["Abc123$", "Secr3t!pw", "Pa$$word-with-24-chars!A"])
def test_hash_then_verify(password: str, rounds: int) -> None:
    hashed = hash_password(password, rounds)
    assert hashed != password
    assert verify_password(password, hashed) is True


def test_wrong_password_does_not_verify() -> None:
    hashed = hash_password("Secr3t!pw", 4)
    assert verify_password("Secr3t!pX", hashed) is False
    assert verify_password("", hashed) is False


def test_hashes_are_salted() -> None:
    first = hash_password("Secr3t!pw", 4)
    second = hash_password("Secr3t!pw", 4)
    assert first != second
    assert verify_password("Secr3t!pw", first)
    assert verify_password("Secr3t!pw", second)


def test_cost_factor_is_embedded_in_hash() -> None:
    assert hash_password("Secr3t!pw", 4).startswith("$2b$04$")
    assert hash_password("Secr3t!pw", 5).startswith("$2b$05$")


def test_malformed_hash_is_a_mismatch() -> None:
    assert verify_password("Secr3t!pw", "not-a-bcrypt-hash") is False


def test_multibyte_password_over_72_bytes() -> None:
    """24 four-byte characters is 96 UTF-8 bytes; must not raise."""
    password = "\U0001F511" * 24
    hashed = hash_password(password, 4)
    assert verify_password(password, hashed) is True


class TestPasswordHasher:
    def test_binds_rounds(self) -> None:
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("Secr3t!pw")
        assert hashed.startswith("$2b$04$")
        assert hasher.verify("Secr3t!pw", hashed) is True
        assert hasher.verify("wrong", hashed) is False

    def test_dummy_verify_runs_bcrypt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """dummy_verify must actually call bcrypt so a username miss costs a real check."""
        hasher = PasswordHasher(rounds=4)
        calls: list[tuple[bytes, bytes]] = []

        import auth.passwords as passwords

        real_checkpw = passwords.bcrypt.checkpw

        def spy(plain: bytes, hashed: bytes) -> bool:
            calls.append((plain, hashed))
            return real_checkpw(plain, hashed)

        monkeypatch.setattr(passwords.bcrypt, "checkpw", spy)
        assert hasher.dummy_verify("Secr3t!pw") is None
        assert len(calls) == 1
        assert calls[0][1].startswith(b"$2b$04$")

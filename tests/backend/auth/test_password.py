import pytest

from backend.auth.password import BCRYPT_ROUNDS, hash_password, verify_password


def test_hash_password_is_salted_and_uses_fixed_work_factor() -> None:
    first = hash_password('p1')
    second = hash_password('p1')

    assert first != second
    assert first != 'p1'
    assert first.startswith(f'$2b${BCRYPT_ROUNDS:02d}$')


def test_verify_password_accepts_matching_password() -> None:
    assert verify_password('correct horse', hash_password('correct horse')) is True


def test_verify_password_returns_false_for_wrong_password() -> None:
    assert verify_password('wrong', hash_password('correct horse')) is False


def test_verify_password_returns_false_for_password_past_bcrypt_limit() -> None:
    assert verify_password('x' * 100, hash_password('x' * 72)) is False


def test_verify_password_raises_for_malformed_stored_hash() -> None:
    with pytest.raises(ValueError):
        verify_password('p1', 'not-a-bcrypt-hash')

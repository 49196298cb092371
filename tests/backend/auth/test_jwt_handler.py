from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backend.auth import jwt_handler
from backend.auth.jwt_handler import TokenService


def test_issue_and_verify_returns_identity_claims() -> None:
    service = TokenService('secret')
    issued_at = datetime.now(timezone.utc).replace(microsecond=0)

    claims = service.verify(service.issue(7, '123456789012', issued_at=issued_at))

    assert claims is not None
    assert claims.user_id == 7
    assert claims.prn == '123456789012'
    assert claims.issued_at == issued_at
    assert claims.expires_at == issued_at + timedelta(hours=1)


def test_verify_rejects_expired_token() -> None:
    service = TokenService('secret')
    issued_at = datetime.now(timezone.utc) - timedelta(minutes=61)

    assert service.verify(service.issue(7, '123456789012', issued_at=issued_at)) is None


def test_verify_rejects_token_signed_with_another_secret() -> None:
    token = TokenService('other-secret').issue(7, '123456789012')

    assert TokenService('secret').verify(token) is None


def test_verify_rejects_tampered_token() -> None:
    service = TokenService('secret')
    header, payload, signature = service.issue(7, '123456789012').split('.')
    tampered_signature = ('A' if signature[0] != 'A' else 'B') + signature[1:]

    assert service.verify('.'.join([header, payload, tampered_signature])) is None


@pytest.mark.parametrize('token', ['', 'garbage', 'a.b.c'])
def test_verify_rejects_malformed_token(token: str) -> None:
    assert TokenService('secret').verify(token) is None


def test_expired_and_corrupt_tokens_are_rejected_the_same_way() -> None:
    service = TokenService('secret')
    expired = service.issue(7, '123456789012', issued_at=datetime.now(timezone.utc) - timedelta(hours=2))

    assert service.verify(expired) == service.verify('corrupt') is None


def test_verify_rejects_token_without_identity_claims() -> None:
    now = datetime.now(timezone.utc)
    token = jwt.encode({'sub': 'someone', 'iat': now, 'exp': now + timedelta(minutes=5)}, 'secret', algorithm='HS256')

    assert TokenService('secret').verify(token) is None


def test_verify_rejects_token_without_expiry() -> None:
    token = jwt.encode({'id': 7, 'prn': '123456789012', 'iat': datetime.now(timezone.utc)}, 'secret', algorithm='HS256')

    assert TokenService('secret').verify(token) is None


def test_token_service_requires_secret() -> None:
    with pytest.raises(ValueError):
        TokenService('')


def test_get_token_service_uses_configured_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.core.config.JWT_SECRET_KEY', 'configured-secret')
    jwt_handler.get_token_service.cache_clear()
    try:
        token = jwt_handler.get_token_service().issue(1, '123456789012')
    finally:
        jwt_handler.get_token_service.cache_clear()

    assert TokenService('configured-secret').verify(token) is not None

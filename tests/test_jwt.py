from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from task_tracker.auth.jwt import JwtConfig, issue_token, verify_token
from task_tracker.db.models import Role

CFG = JwtConfig(
    alg="HS256",
    issuer="task-tracker",
    audience="task-tracker-api",
    secret="unit-test-secret-0123456789abcdef",
)


@pytest.mark.parametrize("role", list(Role))
def test_verify_returns_issued_subject_and_role(role: Role) -> None:
    token = issue_token(cfg=CFG, subject="alice@example.com", role=role)

    claims = verify_token(cfg=CFG, token=token)

    assert claims is not None
    assert (claims.subject, claims.role) == ("alice@example.com", role)


def test_expiry_is_issued_at_plus_ttl() -> None:
    now = datetime.now(tz=UTC)
    token = issue_token(
        cfg=CFG, subject="a@example.com", role=Role.user, ttl=timedelta(minutes=15), now=now
    )

    payload = jwt.decode(token, CFG.secret, algorithms=["HS256"], audience=CFG.audience)
    assert payload["exp"] - payload["iat"] == 15 * 60
    assert payload["role"] == "USER"

    claims = verify_token(cfg=CFG, token=token)
    assert claims is not None
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_token_past_ttl_is_invalid() -> None:
    issued = datetime.now(tz=UTC) - timedelta(hours=2)
    token = issue_token(
        cfg=CFG, subject="a@example.com", role=Role.admin, ttl=timedelta(hours=1), now=issued
    )

    assert verify_token(cfg=CFG, token=token) is None


def test_token_signed_with_another_secret_is_invalid() -> None:
    other = JwtConfig(
        alg=CFG.alg, issuer=CFG.issuer, audience=CFG.audience, secret="x" * 40
    )
    token = issue_token(cfg=other, subject="a@example.com", role=Role.admin)

    assert verify_token(cfg=CFG, token=token) is None


def test_tampered_payload_is_invalid() -> None:
    token = issue_token(cfg=CFG, subject="a@example.com", role=Role.user)
    header, _, signature = token.split(".")
    forged_payload = jwt.encode(
        {"sub": "a@example.com", "role": "ADMIN"}, "whatever-secret-0123456789abcdef"
    ).split(".")[1]

    assert verify_token(cfg=CFG, token=f"{header}.{forged_payload}.{signature}") is None


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
def test_malformed_token_is_invalid(token: str) -> None:
    assert verify_token(cfg=CFG, token=token) is None


def test_wrong_audience_is_invalid() -> None:
    other = JwtConfig(alg=CFG.alg, issuer=CFG.issuer, audience="someone-else", secret=CFG.secret)
    token = issue_token(cfg=other, subject="a@example.com", role=Role.user)

    assert verify_token(cfg=CFG, token=token) is None


def test_unknown_role_claim_is_invalid() -> None:
    now = datetime.now(tz=UTC)
    token = jwt.encode(
        {
            "iss": CFG.issuer,
            "aud": CFG.audience,
            "sub": "a@example.com",
            "role": "ROOT",
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=5)).timestamp()),
        },
        CFG.secret,
        algorithm="HS256",
    )

    assert verify_token(cfg=CFG, token=token) is None

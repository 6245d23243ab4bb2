"""
task_tracker.auth.jwt

JWT issuing and verification (the token service).

Responsibilities:
- Issue short-lived bearer tokens carrying (subject, role).
- Verify tokens with strict claim requirements (iss/aud/exp/iat/sub/role).
- Collapse every failure mode into a single INVALID outcome (`None`).

Note:
- Tokens are stateless; there is no revocation list. The TTL bounds how long a
  changed role keeps its old value in circulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from task_tracker.db.models import Role
from task_tracker.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


@dataclass(frozen=True, slots=True)
class TokenClaims:
    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    role: Role,
    ttl: timedelta = timedelta(hours=1),
    now: datetime | None = None,
) -> str:
    now = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def verify_token(*, cfg: JwtConfig, token: str) -> TokenClaims | None:
    try:
        # jwt.decode enforces signature + registered claims (issuer/audience/exp, etc.).
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except InvalidTokenError:
        return None

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    try:
        role = Role(payload.get("role"))
    except (TypeError, ValueError):
        return None

    return TokenClaims(
        subject=subject,
        role=role,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
    )


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `services.auth_service` (register/login); verification by
# `auth.deps.get_principal` on every protected request.

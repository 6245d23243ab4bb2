"""
task_tracker.services.auth_service

Registration, login and admin bootstrap.

Responsibilities:
- Create USER identities with hashed passwords and hand back a bearer token.
- Authenticate credentials with a uniform failure message.
- Seed (or promote) the configured bootstrap ADMIN outside the request path.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from task_tracker.auth.jwt import JwtConfig, issue_token
from task_tracker.auth.passwords import hash_password, verify_password
from task_tracker.db.models import Role, User
from task_tracker.db.repositories.users import UserRepo
from task_tracker.errors import AuthenticationFailed, Conflict
from task_tracker.observability.logging import get_logger
from task_tracker.settings import Settings

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    def issue_for(self, user: User) -> str:
        return issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            subject=user.email,
            role=user.role,
            ttl=self._settings.jwt_ttl,
        )

    async def register(
        self, *, email: str, password: str, name: str | None = None
    ) -> tuple[User, str]:
        # Self-registration always yields USER; ADMIN comes only from bootstrap or promotion.
        email = normalize_email(email)
        if await self._users.get_by_email(email) is not None:
            raise Conflict("User already exists")

        try:
            user = await self._users.create(
                email=email, password_hash=hash_password(password), role=Role.user, name=name
            )
            await self._session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email.
            await self._session.rollback()
            raise Conflict("User already exists") from e

        log.info("user.registered", user_id=user.id, role=user.role.value)
        return user, self.issue_for(user)

    async def login(self, *, email: str, password: str) -> tuple[User, str]:
        user = await self._users.get_by_email(normalize_email(email))
        if user is None or not verify_password(password, user.password_hash):
            log.info("auth.login_failed")
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return user, self.issue_for(user)

    async def ensure_admin(self, *, email: str, password: str) -> User:
        """
        Startup bootstrap: create the admin if missing, or promote an existing user.
        An existing user's password is left untouched.
        """

        email = normalize_email(email)
        user = await self._users.get_by_email(email)
        if user is None:
            user = await self._users.create(
                email=email, password_hash=hash_password(password), role=Role.admin
            )
            log.info("bootstrap.admin_created", user_id=user.id)
        elif user.role is not Role.admin:
            await self._users.set_role(user, Role.admin)
            log.info("bootstrap.admin_promoted", user_id=user.id)
        await self._session.commit()
        return user


async def bootstrap_admin(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> User | None:
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        return None
    async with session_factory() as session:
        return await AuthService(session=session, settings=settings).ensure_admin(
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
        )


# --- Module Notes -----------------------------------------------------------
# Tokens embed the role at issue time. A role change takes effect for the user on
# their next login (or when the old token expires).

"""Accounts, sign-in and the per-update session context."""

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

import bcrypt
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from splitter.database.models import Account, Profile
from splitter.utils.constants import AuthEvent
from splitter.utils.exceptions import AuthError
from splitter.utils.validators import validate_email, validate_password, validate_name

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class AuthSession:
    """Signed-in account as seen by handlers."""

    account_id: uuid.UUID
    email: str
    telegram_user_id: int
    profile_id: Optional[uuid.UUID] = None
    profile_name: Optional[str] = None


Listener = Callable[[AuthEvent, Optional[AuthSession]], None]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    # Sign-up caps passwords at the 72-byte bcrypt limit
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _to_session(account: Account) -> AuthSession:
    profile = account.profile
    return AuthSession(
        account_id=account.id,
        email=account.email,
        telegram_user_id=account.telegram_user_id,
        profile_id=profile.id if profile else None,
        profile_name=profile.name if profile else None,
    )


class AuthService:
    """Service for sign-up, sign-in and sign-out."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_account_by_email(self, email: str) -> Optional[Account]:
        result = await self.session.execute(
            select(Account)
            .where(Account.email == email)
            .options(selectinload(Account.profile))
        )
        return result.scalar_one_or_none()

    async def _bind_telegram_user(self, account: Account, telegram_user_id: int):
        # One Telegram user is signed in to at most one account
        await self.session.execute(
            update(Account)
            .where(Account.telegram_user_id == telegram_user_id, Account.id != account.id)
            .values(telegram_user_id=None)
        )
        account.telegram_user_id = telegram_user_id
        await self.session.flush()

    async def sign_up(
            self,
            email: str,
            password: str,
            name: str,
            telegram_user_id: Optional[int] = None
    ) -> Optional[AuthSession]:
        """
        Create an account and its roommate profile.

        Returns:
            Session of the new account when telegram_user_id is given,
            otherwise None

        Raises:
            AuthError: invalid input or email already registered
        """
        is_valid, email, error = validate_email(email)
        if not is_valid:
            raise AuthError(error)
        is_valid, error = validate_password(password)
        if not is_valid:
            raise AuthError(error)
        is_valid, error = validate_name(name)
        if not is_valid:
            raise AuthError(error)

        if await self._get_account_by_email(email) is not None:
            raise AuthError("User already registered")

        account = Account(email=email, password_hash=hash_password(password))
        account.profile = Profile(name=name.strip())
        self.session.add(account)
        await self.session.flush()
        logger.info("Account %s signed up", account.id)

        if telegram_user_id is None:
            return None

        await self._bind_telegram_user(account, telegram_user_id)
        return _to_session(account)

    async def sign_in(
            self,
            email: str,
            password: str,
            telegram_user_id: int
    ) -> AuthSession:
        """
        Check credentials and attach the account to a Telegram user.

        Raises:
            AuthError: unknown email or wrong password
        """
        is_valid, email, error = validate_email(email)
        if not is_valid:
            raise AuthError(error)

        account = await self._get_account_by_email(email)
        if account is None or not check_password(password or "", account.password_hash):
            raise AuthError("Invalid login credentials")

        await self._bind_telegram_user(account, telegram_user_id)
        logger.info("Account %s signed in from Telegram user %s", account.id, telegram_user_id)
        return _to_session(account)

    async def sign_out(self, telegram_user_id: int) -> bool:
        """Detach the Telegram user from its account."""
        result = await self.session.execute(
            update(Account)
            .where(Account.telegram_user_id == telegram_user_id)
            .values(telegram_user_id=None)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def get_session(self, telegram_user_id: int) -> Optional[AuthSession]:
        """Current session of a Telegram user, if signed in."""
        result = await self.session.execute(
            select(Account)
            .where(Account.telegram_user_id == telegram_user_id)
            .options(selectinload(Account.profile))
        )
        account = result.scalar_one_or_none()
        return _to_session(account) if account else None


class SessionContext:
    """
    Auth state passed explicitly to handlers.

    Created per update: init() fetches the current session, subscribe()
    registers change listeners and teardown() drops them.
    """

    def __init__(self):
        self._session: Optional[AuthSession] = None
        self._listeners: List[Listener] = []
        self.loading = True

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def profile_id(self) -> Optional[uuid.UUID]:
        return self._session.profile_id if self._session else None

    async def init(self, auth_service: AuthService, telegram_user_id: int):
        """Load the current session of a Telegram user."""
        try:
            self._session = await auth_service.get_session(telegram_user_id)
        finally:
            self.loading = False
        self._notify(AuthEvent.INITIAL_SESSION)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_session(self, session: AuthSession):
        self._session = session
        self._notify(AuthEvent.SIGNED_IN)

    def clear(self):
        self._session = None
        self._notify(AuthEvent.SIGNED_OUT)

    def teardown(self):
        self._listeners.clear()

    def _notify(self, event: AuthEvent):
        for listener in list(self._listeners):
            listener(event, self._session)

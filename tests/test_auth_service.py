"""Tests for accounts, sign-in and the session context."""

import uuid

import pytest

from splitter.services.auth_service import (
    AuthService,
    AuthSession,
    SessionContext,
    check_password,
    hash_password,
)
from splitter.utils.constants import AuthEvent
from splitter.utils.exceptions import AuthError


class TestPasswords:
    """bcrypt hashing."""

    def test_hash_and_check(self):
        password_hash = hash_password("secret1")

        assert password_hash != "secret1"
        assert check_password("secret1", password_hash)
        assert not check_password("secret2", password_hash)

    def test_check_overlong_password(self):
        assert not check_password("x" * 100, hash_password("secret1"))


class TestAuthService:
    """Sign-up, sign-in and sign-out."""

    async def test_sign_up_creates_account_and_profile(self, session):
        auth_session = await AuthService(session).sign_up(
            " Eve@Example.com ", "secret1", "Eve", telegram_user_id=42
        )

        assert auth_session.email == "eve@example.com"
        assert auth_session.profile_name == "Eve"
        assert auth_session.profile_id is not None
        assert auth_session.telegram_user_id == 42

    async def test_sign_up_without_telegram_user(self, session):
        assert await AuthService(session).sign_up("eve@example.com", "secret1", "Eve") is None
        assert await AuthService(session).get_session(42) is None

    async def test_sign_up_rejects_duplicate_email(self, session, account_with_profile):
        with pytest.raises(AuthError, match="User already registered"):
            await AuthService(session).sign_up("DANA@example.com", "secret1", "Dana Two")

    @pytest.mark.parametrize("email, password, name", [
        ("not-an-email", "secret1", "Eve"),
        ("eve@example.com", "123", "Eve"),
        ("eve@example.com", "secret1", "E"),
    ])
    async def test_sign_up_validates_input(self, session, email, password, name):
        with pytest.raises(AuthError):
            await AuthService(session).sign_up(email, password, name)

    async def test_sign_in(self, session, account_with_profile):
        auth_session = await AuthService(session).sign_in("dana@example.com", "secret1", 7)

        assert auth_session.account_id == account_with_profile.id
        assert auth_session.profile_name == "Dana"
        assert (await AuthService(session).get_session(7)).account_id == account_with_profile.id

    async def test_sign_in_wrong_password(self, session, account_with_profile):
        with pytest.raises(AuthError, match="Invalid login credentials"):
            await AuthService(session).sign_in("dana@example.com", "wrong-password", 7)

    async def test_sign_in_rejects_overlong_password(self, session, account_with_profile):
        with pytest.raises(AuthError, match="Invalid login credentials"):
            await AuthService(session).sign_in("dana@example.com", "x" * 100, 42)

    async def test_sign_in_unknown_email(self, session):
        with pytest.raises(AuthError, match="Invalid login credentials"):
            await AuthService(session).sign_in("nobody@example.com", "secret1", 7)

    async def test_sign_in_moves_telegram_user_between_accounts(self, session, account_with_profile):
        service = AuthService(session)
        await service.sign_up("eve@example.com", "secret1", "Eve", telegram_user_id=7)

        await service.sign_in("dana@example.com", "secret1", 7)

        assert (await service.get_session(7)).email == "dana@example.com"

    async def test_sign_out(self, session, account_with_profile):
        service = AuthService(session)
        await service.sign_in("dana@example.com", "secret1", 7)

        assert await service.sign_out(7) is True
        assert await service.get_session(7) is None
        assert await service.sign_out(7) is False


class TestSessionContext:
    """Session state and change listeners."""

    @pytest.fixture
    def auth_session(self):
        return AuthSession(
            account_id=uuid.uuid4(),
            email="dana@example.com",
            telegram_user_id=7,
            profile_id=uuid.uuid4(),
            profile_name="Dana",
        )

    async def test_init_loads_signed_in_user(self, session, account_with_profile):
        await AuthService(session).sign_in("dana@example.com", "secret1", 7)
        events = []
        context = SessionContext()
        context.subscribe(lambda event, s: events.append((event, s)))

        assert context.loading
        await context.init(AuthService(session), 7)

        assert not context.loading
        assert context.is_authenticated
        assert context.profile_id == account_with_profile.profile.id
        assert events[0][0] == AuthEvent.INITIAL_SESSION

    async def test_init_anonymous(self, session):
        context = SessionContext()

        await context.init(AuthService(session), 99)

        assert not context.is_authenticated
        assert context.session is None
        assert context.profile_id is None

    def test_sign_in_and_out_events(self, auth_session):
        events = []
        context = SessionContext()
        context.subscribe(lambda event, s: events.append((event, s)))

        context.set_session(auth_session)
        context.clear()

        assert events == [(AuthEvent.SIGNED_IN, auth_session), (AuthEvent.SIGNED_OUT, None)]
        assert not context.is_authenticated

    def test_unsubscribe(self, auth_session):
        events = []
        context = SessionContext()
        unsubscribe = context.subscribe(lambda event, s: events.append(event))

        unsubscribe()
        unsubscribe()
        context.set_session(auth_session)

        assert events == []

    def test_teardown_drops_listeners(self, auth_session):
        events = []
        context = SessionContext()
        context.subscribe(lambda event, s: events.append(event))

        context.teardown()
        context.set_session(auth_session)

        assert events == []
        assert context.is_authenticated

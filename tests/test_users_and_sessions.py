import pytest

from crud import user_crud
from crud.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from schemas.user import UserCreate, UserProfileUpdate
from services.session_service import SessionManager


@pytest.fixture
def registration():
    return UserCreate(name="Ana López", email="Ana@Nuvo.com.ar", password="perfume123", phone="1155550000")


class TestUserCrud:
    async def test_register_stores_hashed_password(self, registration, mock_database):
        profile = await user_crud.register_user(registration)

        stored = await mock_database.users.find_one({"email": "ana@nuvo.com.ar"})
        assert profile.email == "ana@nuvo.com.ar"
        assert profile.created_at is not None
        assert profile.last_login is not None
        assert stored["password_hash"] != "perfume123"
        assert "password_hash" not in profile.model_dump()

    async def test_duplicate_email_is_rejected(self, registration):
        await user_crud.register_user(registration)

        with pytest.raises(EmailAlreadyRegisteredError):
            await user_crud.register_user(registration)

    async def test_login_with_valid_credentials(self, registration):
        registered = await user_crud.register_user(registration)

        profile = await user_crud.login_user("ana@nuvo.com.ar", "perfume123")
        assert profile.uid == registered.uid

    async def test_login_with_wrong_password(self, registration):
        await user_crud.register_user(registration)

        with pytest.raises(InvalidCredentialsError):
            await user_crud.login_user("ana@nuvo.com.ar", "wrong-password")

    async def test_login_unknown_email(self):
        with pytest.raises(InvalidCredentialsError):
            await user_crud.login_user("nobody@nuvo.com.ar", "perfume123")

    async def test_login_for_account_without_password_hash(self, mock_database):
        await mock_database.users.insert_one({"name": "Ana", "email": "ana@nuvo.com.ar"})

        with pytest.raises(InvalidCredentialsError):
            await user_crud.login_user("ana@nuvo.com.ar", "perfume123")

    async def test_update_profile(self, registration):
        registered = await user_crud.register_user(registration)

        profile = await user_crud.update_user_profile(registered.uid, UserProfileUpdate(phone="1166660000"))
        assert profile.phone == "1166660000"
        assert profile.name == "Ana López"
        assert profile.updated_at is not None

    async def test_get_user_data_with_bad_id(self):
        assert await user_crud.get_user_data("not-an-id") is None


class TestSessionManager:
    async def test_listeners_follow_sign_in_and_sign_out(self, registration):
        profile = await user_crud.register_user(registration)
        manager = SessionManager()
        events = []
        unsubscribe = manager.subscribe(events.append)

        session = manager.sign_in(profile)
        assert manager.get_session(session.token) is session
        assert events == [session]

        assert manager.sign_out(session.token) is True
        assert events == [session, None]
        assert manager.get_session(session.token) is None

        unsubscribe()
        manager.sign_in(profile)
        assert len(events) == 2

    async def test_failing_listener_does_not_block_sign_in(self, registration):
        profile = await user_crud.register_user(registration)
        manager = SessionManager()

        def broken_listener(session):
            raise RuntimeError("listener failed")

        manager.subscribe(broken_listener)
        session = manager.sign_in(profile)
        assert manager.get_session(session.token) is session

    async def test_refresh_user_data_reloads_profile(self, registration):
        profile = await user_crud.register_user(registration)
        manager = SessionManager()
        session = manager.sign_in(profile)

        await user_crud.update_user_profile(profile.uid, UserProfileUpdate(name="Ana María"))
        refreshed = await manager.refresh_user_data(session.token)
        assert refreshed.user.name == "Ana María"

    async def test_refresh_ends_session_when_profile_is_gone(self, registration, mock_database):
        profile = await user_crud.register_user(registration)
        manager = SessionManager()
        session = manager.sign_in(profile)

        await mock_database.users.delete_many({})
        assert await manager.refresh_user_data(session.token) is None
        assert manager.get_session(session.token) is None

    async def test_dispose_drops_sessions_and_listeners(self, registration):
        profile = await user_crud.register_user(registration)
        manager = SessionManager()
        manager.subscribe(lambda session: None)
        session = manager.sign_in(profile)

        manager.dispose()
        assert manager.get_session(session.token) is None
        assert manager.listeners == []
        with pytest.raises(RuntimeError):
            manager.sign_in(profile)

    def test_sign_out_unknown_token(self):
        assert SessionManager().sign_out("missing") is False

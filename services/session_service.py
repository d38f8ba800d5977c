from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from schemas.user import UserProfile
from crud.user_crud import get_user_data
import logging
import secrets

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional["Session"]], None]


@dataclass
class Session:
    token: str
    user: UserProfile
    signed_in_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def user_id(self) -> str:
        return self.user.uid


class SessionManager:
    """Holds the signed-in sessions of the running API process.

    Built once at startup and handed to the routes through a dependency.
    Listeners registered with ``subscribe`` receive the new session on
    sign-in and ``None`` on sign-out.
    """

    def __init__(self):
        self.sessions: Dict[str, Session] = {}
        self.listeners: List[AuthListener] = []
        self.disposed = False

    def _ensure_active(self):
        if self.disposed:
            raise RuntimeError("SessionManager has been disposed")

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._ensure_active()
        self.listeners.append(listener)

        def unsubscribe():
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def _notify(self, session: Optional[Session]):
        for listener in list(self.listeners):
            try:
                listener(session)
            except Exception as e:
                logger.error(f"Auth state listener failed: {str(e)}", exc_info=True)

    def sign_in(self, user: UserProfile) -> Session:
        self._ensure_active()
        session = Session(token=secrets.token_urlsafe(32), user=user)
        self.sessions[session.token] = session
        logger.info(f"User {user.uid} signed in")
        self._notify(session)
        return session

    def sign_out(self, token: str) -> bool:
        session = self.sessions.pop(token, None)
        if session is None:
            return False
        logger.info(f"User {session.user_id} signed out")
        self._notify(None)
        return True

    def get_session(self, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        return self.sessions.get(token)

    async def refresh_user_data(self, token: str) -> Optional[Session]:
        """Reload the profile of a session from the users collection."""
        session = self.get_session(token)
        if session is None:
            return None

        user = await get_user_data(session.user_id)
        if user is None:
            logger.warning(f"Profile for user {session.user_id} no longer exists, ending session")
            self.sign_out(token)
            return None

        session.user = user
        return session

    def dispose(self):
        """Drop every session and listener. The manager cannot be used afterwards."""
        count = len(self.sessions)
        self.sessions.clear()
        self.listeners.clear()
        self.disposed = True
        logger.info(f"SessionManager disposed ({count} sessions dropped)")

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
from services.session_service import Session, SessionManager

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session_manager: SessionManager = Depends(get_session_manager)
) -> Optional[Session]:
    if credentials is None:
        return None
    return session_manager.get_session(credentials.credentials)


def require_session(session: Optional[Session] = Depends(get_optional_session)) -> Session:
    if session is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return session

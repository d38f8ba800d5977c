from fastapi import APIRouter, HTTPException, Depends
from schemas.user import LoginResponse, UserCreate, UserLogin, UserProfile, UserProfileUpdate
from crud import user_crud
from crud.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from routes.dependencies import get_session_manager, require_session
from services.session_service import Session, SessionManager

router = APIRouter()


@router.post("/register", response_model=LoginResponse, status_code=201)
async def register_user(user: UserCreate, session_manager: SessionManager = Depends(get_session_manager)):
    try:
        profile = await user_crud.register_user(user)
    except EmailAlreadyRegisteredError as e:
        raise HTTPException(status_code=409, detail=str(e))
    session = session_manager.sign_in(profile)
    return LoginResponse(token=session.token, user=session.user)


@router.post("/login", response_model=LoginResponse)
async def login_user(login_data: UserLogin, session_manager: SessionManager = Depends(get_session_manager)):
    try:
        profile = await user_crud.login_user(login_data.email, login_data.password.get_secret_value())
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    session = session_manager.sign_in(profile)
    return LoginResponse(token=session.token, user=session.user)


@router.post("/logout")
async def logout_user(
    session: Session = Depends(require_session),
    session_manager: SessionManager = Depends(get_session_manager)
):
    session_manager.sign_out(session.token)
    return {"status": "success"}


@router.get("/me", response_model=UserProfile)
async def get_current_user(
    session: Session = Depends(require_session),
    session_manager: SessionManager = Depends(get_session_manager)
):
    refreshed = await session_manager.refresh_user_data(session.token)
    if not refreshed:
        raise HTTPException(status_code=404, detail="User not found")
    return refreshed.user


@router.put("/me", response_model=UserProfile)
async def update_current_user(
    updates: UserProfileUpdate,
    session: Session = Depends(require_session),
    session_manager: SessionManager = Depends(get_session_manager)
):
    profile = await user_crud.update_user_profile(session.user_id, updates)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    await session_manager.refresh_user_data(session.token)
    return profile

"""
Google sign-in, session token and shared password endpoints
"""

from fastapi import APIRouter

from app.core.deps import CurrentUserDep, SessionDep
from app.core.security import check_app_password
from app.core.config import settings
from app.schemas.auth import (
    GoogleTokenRequest,
    PasswordCheckRequest,
    PasswordCheckResponse,
    TokenResponse,
    UserResponse,
)
from app.services.auth_service import AuthService

router = APIRouter()


@router.post("/google", response_model=TokenResponse, summary="Authenticate with Google")
async def google_login(token_request: GoogleTokenRequest, db: SessionDep):
    """
    Exchange a Google ID token for an API access token.
    Only accounts on the organization's email domain are accepted.
    """
    return await AuthService(db).login_with_google(token_request.token)


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def get_current_user_info(user_id: CurrentUserDep, db: SessionDep):
    user = await AuthService(db).get_user(user_id)
    return UserResponse.model_validate(user)


@router.post("/refresh", response_model=TokenResponse, summary="Issue a fresh access token")
async def refresh_token(user_id: CurrentUserDep, db: SessionDep):
    user = await AuthService(db).get_user(user_id)
    return AuthService.issue_token(user)


@router.post("/validate-password", response_model=PasswordCheckResponse)
async def validate_password(body: PasswordCheckRequest):
    """Check the shared front-end password"""
    if not settings.app_password:
        return PasswordCheckResponse(valid=False, error="Password not configured")
    return PasswordCheckResponse(valid=check_app_password(body.password))

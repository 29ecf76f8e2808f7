"""
Auth Service

Google sign-in restricted to the organization's email domain, and issuance
of the API's own access tokens.
"""

from typing import Optional

from google.auth.transport import requests
from google.oauth2 import id_token
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import AuthenticationError, NotFoundError, PermissionDeniedError
from app.core.logging import get_logger
from app.core.security import create_access_token, decode_token, email_in_allowed_domain
from app.models.user import User
from app.schemas.auth import GoogleUserInfo, TokenResponse, UserResponse

logger = get_logger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def _test_token_info(token: str) -> Optional[GoogleUserInfo]:
    """In test-auth mode a JWT signed with our own secret stands in for a Google token"""
    payload = decode_token(token)
    if not payload or not payload.get("sub") or not payload.get("email"):
        return None
    return GoogleUserInfo(
        sub=payload["sub"],
        email=payload["email"],
        name=payload.get("name", "Test User"),
        picture=payload.get("picture"),
        locale=payload.get("locale", "en"),
    )


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    async def verify_google_token(token: str) -> GoogleUserInfo:
        """Verify a Google ID token and enforce the allowed email domain"""
        info = _test_token_info(token) if settings.enable_test_auth else None

        if info is None:
            if not settings.google_client_id:
                raise AuthenticationError("Google sign-in is not configured")
            try:
                idinfo = await run_in_threadpool(
                    id_token.verify_oauth2_token, token, requests.Request(), settings.google_client_id
                )
            except ValueError as e:
                raise AuthenticationError(f"Invalid Google token: {e}") from e

            if idinfo.get("iss") not in GOOGLE_ISSUERS:
                raise AuthenticationError("Invalid Google token: wrong issuer")
            if not idinfo.get("email"):
                raise AuthenticationError("Google token has no email address")

            info = GoogleUserInfo(
                sub=idinfo["sub"],
                email=idinfo["email"],
                name=idinfo.get("name", idinfo["email"]),
                picture=idinfo.get("picture"),
                locale=idinfo.get("locale", "en"),
            )

        if not email_in_allowed_domain(info.email):
            logger.warning(f"Rejected sign-in outside @{settings.allowed_email_domain}")
            raise PermissionDeniedError(
                f"Only @{settings.allowed_email_domain} accounts can sign in"
            )
        return info

    async def get_user(self, user_id: str) -> User:
        user = await self.session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def get_or_create_user(self, info: GoogleUserInfo) -> User:
        result = await self.session.execute(select(User).where(User.id == info.sub))
        user = result.scalar_one_or_none()

        if user is None:
            user = User(
                id=info.sub,
                email=info.email,
                display_name=info.name,
                picture=info.picture,
                locale=info.locale,
                status="active",
            )
            self.session.add(user)
            logger.info(f"Created user {info.sub}")
        else:
            user.email = info.email
            user.display_name = info.name
            user.picture = info.picture
            user.locale = info.locale

        await self.session.commit()
        await self.session.refresh(user)
        return user

    @staticmethod
    def issue_token(user: User) -> TokenResponse:
        access_token = create_access_token(data={"sub": user.id, "email": user.email})
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )

    async def login_with_google(self, token: str) -> TokenResponse:
        info = await self.verify_google_token(token)
        user = await self.get_or_create_user(info)
        if user.status != "active":
            raise PermissionDeniedError("User account is disabled")
        return self.issue_token(user)

"""Authentication routes.

This module handles HTTP endpoints for user registration and login, and the
bearer-token dependencies used by every protected route.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    User,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Resolve the bearer token to a user id.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent.

    Returns:
        The ``sub`` claim of the token.

    Raises:
        HTTPException: 401 if the token is absent, invalid, or expired.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError:
        raise _unauthorized()
    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized()
    return user_id


def get_current_user(
    user_manager: UserManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> User:
    """Get current authenticated user.

    Raises:
        HTTPException: 401 if the token's user no longer exists.
    """
    try:
        return user_manager.get_user_by_id(user_id)
    except UserNotFoundError:
        raise _unauthorized("User not found")


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(data={"sub": user.user_id})
    return AuthResponse(token=token, user=UserProfile.from_user(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(req: RegisterRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Register a new user and log them in.

    Raises:
        HTTPException: 400 if the email is already registered.
    """
    try:
        user = user_manager.create_user(
            name=req.name,
            email=req.email,
            password=req.password,
            college=req.college,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Login with email and password.

    Raises:
        HTTPException: 400 for an unknown email or wrong password.
    """
    try:
        user = user_manager.authenticate(req.email, req.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    logger.info("User %s logged in", user.user_id)
    return _auth_response(user)


@router.post("/logout", summary="Log out")
def logout() -> dict:
    """Logout endpoint.

    Note: Since we're using stateless JWT tokens, logout is handled
    client-side by removing the token. This endpoint exists for API
    consistency.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=UserProfile, summary="Current user profile")
def get_current_user_info(
    user_manager: UserManagerDep,
    user_id: str = Depends(get_current_user_id),
) -> UserProfile:
    try:
        user = user_manager.get_user_by_id(user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserProfile.from_user(user)

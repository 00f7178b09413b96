"""Authentication routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import or_

from folklore_admin.core.config import settings
from folklore_admin.core.email import send_password_reset_email
from folklore_admin.core.rate_limit import limiter
from folklore_admin.core.rbac import CurrentUser, UserRole
from folklore_admin.core.security import (
    blacklist_token,
    create_access_token,
    generate_password_reset_token,
    get_password_hash,
    verify_password,
    verify_password_reset_token,
)
from folklore_admin.db.session import DbSession
from folklore_admin.models.user import User, UserLoginLog
from folklore_admin.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
)
from folklore_admin.schemas.user import UserResponse

logger = logging.getLogger("auth")

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _issue_token(user: User) -> str:
    return create_access_token(
        data={
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "role": user.role.value,
        }
    )


@router.post("/login", response_model=Token)
@limiter.limit("5/minute")
def login(request: Request, login_request: LoginRequest, db: DbSession):
    """Authenticate with username or email and return a JWT token."""
    client_ip = _client_ip(request)
    identifier = login_request.username or login_request.email
    user = (
        db.query(User)
        .filter(or_(User.username == identifier, User.email == identifier))
        .first()
    )

    if not user or not verify_password(login_request.password, user.password_hash):
        logger.warning(f"Failed login attempt for: {identifier} from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    if not user.is_active:
        logger.warning(f"Login attempt for inactive user: {identifier} (ID: {user.id}) from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )

    user.last_login_at = datetime.now(timezone.utc)
    user.last_login_ip = client_ip
    db.add(UserLoginLog(
        user_id=user.id,
        ip_address=client_ip,
        user_agent=(request.headers.get("user-agent") or "")[:500] or None,
    ))
    db.commit()

    logger.info(f"Successful login: {user.username} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    return Token(access_token=_issue_token(user))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def register(request: Request, data: RegisterRequest, db: DbSession):
    """Register the first user (initial setup only); it becomes admin."""
    client_ip = _client_ip(request)

    if db.query(User).first():
        logger.warning(f"Registration attempt blocked (users exist) from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Registration is closed. Contact administrator.",
        )

    user = User(
        username=data.username,
        email=data.email,
        password_hash=get_password_hash(data.password),
        role=UserRole.ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"New user registered: {user.username} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    return user


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: CurrentUser, db: DbSession):
    """Get current authenticated user info."""
    user = db.get(User, current_user.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/profile", response_model=UserResponse)
def update_profile(data: ProfileUpdate, current_user: CurrentUser, db: DbSession):
    """Update the signed-in user's username, email or password."""
    user = db.get(User, current_user.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if data.username and data.username != user.username:
        if db.query(User).filter(User.username == data.username, User.id != user.id).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
        user.username = data.username
    if data.email and data.email != user.email:
        if db.query(User).filter(User.email == data.email, User.id != user.id).first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
        user.email = data.email

    if data.new_password:
        if not verify_password(data.current_password or "", user.password_hash):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")
        user.password_hash = get_password_hash(data.new_password)
        logger.info(f"Password changed for user: {user.username} (ID: {user.id})")

    db.commit()
    db.refresh(user)
    return user


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def forgot_password(request: Request, data: ForgotPasswordRequest, db: DbSession):
    """Mail a reset link; the answer is the same whether the email is known or not."""
    user = db.query(User).filter(User.email == data.email).first()
    if user and user.is_active:
        token = generate_password_reset_token(user.id, user.password_hash)
        reset_url = f"{settings.admin_base_url.rstrip('/')}/reset-password?token={token}"
        sent = send_password_reset_email(to=user.email, username=user.username, reset_url=reset_url)
        logger.info(f"Password reset requested for user ID {user.id} (email sent: {sent})")
    else:
        logger.info(f"Password reset requested for unknown email from IP: {_client_ip(request)}")
    return MessageResponse(message="If the email is registered, a reset link has been sent.")


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, data: ResetPasswordRequest, db: DbSession):
    """Set a new password using the emailed reset token."""
    verified = verify_password_reset_token(data.reset_token)
    user = db.get(User, verified[0]) if verified else None
    if not user or not user.is_active or user.password_hash[-12:] != verified[1]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token",
        )

    user.password_hash = get_password_hash(data.new_password)
    db.commit()
    logger.info(f"Password reset completed for user: {user.username} (ID: {user.id})")
    return MessageResponse(message="Password has been reset. You can now log in.")


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: CurrentUser):
    """Invalidate the current JWT token."""
    blacklist_token(current_user.token)
    logger.info(f"User logged out: {current_user.email} (ID: {current_user.user_id})")
    return MessageResponse(message="Logged out successfully")

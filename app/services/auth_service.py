import logging
import re
import time
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError
from fastapi import HTTPException, status

from app.core.config import settings
from app.models.user import User, RoleEnum
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserLogin, UserRegister, AuthResponse

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 20


def sanitize_username(value: Optional[str]) -> str:
    if not value:
        return ""
    return re.sub(r"[^a-z0-9_]", "", value.lower())[:USERNAME_MAX_LENGTH]


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.REFRESH_SECRET_KEY = settings.REFRESH_SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            # not a bcrypt hash
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None):
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_refresh_token(self, data: dict):
        to_encode = data.copy()
        expire = datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        # jti keeps two tokens issued within the same second distinct
        to_encode.update({"exp": expire, "jti": f"{data.get('sub')}-{time.time_ns()}"})
        return jwt.encode(to_encode, self.REFRESH_SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_refresh_token(self, refresh_token: str) -> Optional[int]:
        try:
            payload = jwt.decode(refresh_token, self.REFRESH_SECRET_KEY, algorithms=[self.ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return int(user_id)

    async def issue_tokens(self, repo: UserRepository, user: User) -> AuthResponse:
        """Create an access/refresh pair and persist the refresh token."""
        role = user.role.value if user.role else RoleEnum.user.value
        access_token = self.create_access_token(
            data={"sub": str(user.id), "role": role},
            expires_delta=timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        refresh_token = self.create_refresh_token(data={"sub": str(user.id)})
        await repo.save_refresh_token(
            user,
            refresh_token,
            datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS),
        )
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            user_id=user.id,
            role=role,
        )

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_email(login_data.email)
        if not user or not self.verify_password(login_data.password, user.password):
            return None
        return user

    async def generate_unique_username(self, repo: UserRepository, preferred: Optional[str], fallback: str) -> str:
        base = sanitize_username(preferred) or sanitize_username(fallback) or f"user{int(time.time())}"
        candidate = base
        suffix = 0
        while await repo.username_taken(candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        email = user_data.email.lower()
        if await repo.get_by_email(email):
            raise HTTPException(status_code=400, detail="User with this email already exists")

        username = await self.generate_unique_username(
            repo, user_data.username or user_data.name, email.split("@")[0]
        )

        new_user = User(
            name=user_data.name.strip(),
            email=email,
            password=self.hash_password(user_data.password),
            role=RoleEnum.user,
            is_active=True,
            phone=user_data.phone or "",
            profile_photo=user_data.profile_photo or "",
            created_at=datetime.utcnow(),
        )
        new_user.set_username(username)

        user = await repo.create_user(new_user)
        logger.info("Registered user %s (%s)", user.id, user.email)
        return user

    async def rotate_refresh_token(self, repo: UserRepository, refresh_token: str) -> Optional[User]:
        """
        Validate a presented refresh token.

        A correctly signed token that is no longer stored means it was already
        rotated away, so the owner's current token is revoked as well.
        """
        user_id = self.decode_refresh_token(refresh_token)
        if user_id is None:
            return None

        user = await repo.get_by_refresh_token(refresh_token)
        if user is None:
            victim = await repo.get_by_id(user_id)
            if victim is not None:
                logger.warning("Refresh token reuse detected for user %s", user_id)
                await repo.revoke_refresh_token(victim)
            return None

        if user.refresh_token_expires is None or user.refresh_token_expires < datetime.utcnow():
            return None
        if user.is_active is False:
            return None
        return user

    async def logout_user(self, repo: UserRepository, refresh_token: str) -> bool:
        user_id = self.decode_refresh_token(refresh_token)
        if user_id is None:
            return False
        user = await repo.get_by_id(user_id)
        if user is None:
            return False
        await repo.revoke_refresh_token(user)
        return True


auth_service = AuthService()

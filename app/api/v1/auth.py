from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.core.dependencies import get_current_user, get_user_repository
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service
from app.schemas.auth import UserLogin, UserRegister, AuthResponse, RefreshTokenRequest
from app.schemas.user import UserRead

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Create an account and issue the first token pair."""
    new_user = await auth_service.register_user(repo, user)
    return await auth_service.issue_tokens(repo, new_user)


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not authenticated_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    return await auth_service.issue_tokens(repo, authenticated_user)


@router.post("/refresh", response_model=AuthResponse)
async def refresh_token(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    """Exchange a refresh token for a new pair; the presented token stops working."""
    user = await auth_service.rotate_refresh_token(repo, request.refresh_token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )
    return await auth_service.issue_tokens(repo, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: RefreshTokenRequest, repo: UserRepository = Depends(get_user_repository)):
    await auth_service.logout_user(repo, request.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
async def me(current_user: User = Depends(get_current_user)):
    return current_user

from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserRegister(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    username: Optional[str] = None
    phone: Optional[str] = None
    profile_photo: Optional[str] = None

class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user_id: int
    role: str

class RefreshTokenRequest(BaseModel):
    refresh_token: str

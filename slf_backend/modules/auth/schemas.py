from pydantic import BaseModel, EmailStr
from typing import Optional, Dict, Any


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    role: str
    redirect_to: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    role: Optional[str] = "client"
    phone_number: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    role: str
    message: str


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    role: str
    role_label: str
    dashboard_path: str
    profile: Optional[Dict[str, Any]] = None


class RedirectResponse(BaseModel):
    path: str
    redirect_to: Optional[str] = None

from fastapi import APIRouter, Depends
from slf_backend.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    CurrentUserResponse, RedirectResponse
)
from slf_backend.modules.auth.service import AuthService
from slf_backend.core.dependencies import (
    get_auth_service, get_current_token, get_current_user, get_optional_user
)
from slf_backend.core.guards import resolve_redirect, role_label, dashboard_path
from slf_backend.config.roles_config import get_selectable_roles
from typing import Dict, List, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user (superadmin cannot self-register)"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token plus the dashboard path for the user's role"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    service.logout(token)
    return {"message": "Berhasil logout"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user, profile and role routing info"""
    role = current_user["role"]
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        role=role,
        role_label=role_label(role),
        dashboard_path=dashboard_path(role),
        profile=current_user.get("profile"),
    )


@router.get("/redirect", response_model=RedirectResponse)
async def get_redirect(
    path: str,
    current_user: Optional[Dict] = Depends(get_optional_user)
):
    """Navigation guard: where should a visit to `path` go for the caller (null = allowed)"""
    authenticated = current_user is not None
    role = current_user["role"] if current_user else None
    return RedirectResponse(path=path, redirect_to=resolve_redirect(path, role, authenticated))


@router.get("/roles", response_model=List[dict])
async def list_roles():
    """Roles offered at registration"""
    return get_selectable_roles()

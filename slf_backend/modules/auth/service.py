import hashlib
import time
from supabase import Client
from slf_backend.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from slf_backend.config.roles_config import ROLES, SUPERADMIN, DEFAULT_ROLE
from slf_backend.core.guards import normalize_role, dashboard_path
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (dashboards fire several requests per page)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth and create their profile row"""
        role = normalize_role(register_data.role)
        if role == SUPERADMIN:
            raise HTTPException(status_code=400, detail="Role superadmin tidak dapat didaftarkan")
        if role not in ROLES:
            raise HTTPException(status_code=400, detail=f"Role tidak valid: {register_data.role}")

        try:
            user_metadata = {"role": role}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Gagal mendaftarkan pengguna")

            self.supabase.table("profiles").upsert({
                "id": auth_response.user.id,
                "email": auth_response.user.email or register_data.email,
                "full_name": register_data.full_name,
                "phone_number": register_data.phone_number,
                "role": role,
                "status": "pending",
            }).execute()

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                role=role,
                message="Registrasi berhasil, menunggu persetujuan admin"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="Email sudah terdaftar")
            logger.error(f"Registration failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Registrasi gagal: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth and return the dashboard to land on"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Email atau password salah")

            profile = self.get_profile(auth_response.user.id)
            role = normalize_role(profile.get("role") if profile else None)

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email,
                role=role,
                redirect_to=dashboard_path(role)
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Email atau password salah")
            logger.error(f"Login failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Login gagal: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Sesi tidak valid atau sudah berakhir")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Sesi tidak valid atau sudah berakhir")
            raise HTTPException(status_code=401, detail="Autentikasi gagal")

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch the profiles row for a user; None when missing or unreadable."""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                return None
            return result.data
        except Exception as e:
            logger.error(f"Gagal fetch role for {user_id}: {e}")
            return None

    def resolve_user(self, token: str) -> Dict[str, Any]:
        """Auth user merged with profile data and the normalized role"""
        user_data = self.get_current_user(token)
        profile = self.get_profile(user_data["id"])
        role = normalize_role(profile.get("role") if profile else DEFAULT_ROLE)
        return {
            **user_data,
            "role": role,
            "client_id": profile.get("client_id") if profile else None,
            "full_name": profile.get("full_name") if profile else None,
            "profile": profile,
        }

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        try:
            # Supabase tokens are stateless JWTs; this drops the server-side session and our cache entry
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Logout failed: {e}")
            return False

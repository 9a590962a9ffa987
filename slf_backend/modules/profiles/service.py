from supabase import Client
from slf_backend.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from slf_backend.core.guards import normalize_role, role_label
from slf_backend.core.filters import matches_search
from slf_backend.config.roles_config import ROLES, CLIENT
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def to_profile_response(row: Dict[str, Any]) -> ProfileResponse:
    role = normalize_role(row.get("role"))
    return ProfileResponse(**{**row, "role": role, "role_label": role_label(role)})


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, profile_id: str) -> ProfileResponse:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", profile_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Pengguna tidak ditemukan")
            return to_profile_response(result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data pengguna")

    def list_profiles(
        self,
        role: Optional[str] = None,
        exclude_clients: bool = False,
        search: Optional[str] = None,
    ) -> List[ProfileResponse]:
        """List profiles ordered by name; optional role filter, staff-only and name/email search"""
        try:
            query = self.supabase.table("profiles").select("*")
            if role:
                query = query.eq("role", normalize_role(role))
            if exclude_clients:
                query = query.neq("role", CLIENT)
            result = query.order("full_name").execute()
            rows = [r for r in (result.data or []) if matches_search(search, r.get("full_name"), r.get("email"))]
            return [to_profile_response(r) for r in rows]
        except Exception as e:
            logger.error(f"Error listing profiles: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data pengguna")

    def update_profile(self, profile_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        for field, value in profile_data.model_dump(exclude_none=True).items():
            update_data[field] = value
        return self._update(profile_id, update_data)

    def set_role(self, profile_id: str, role: str) -> ProfileResponse:
        normalized = normalize_role(role)
        if normalized not in ROLES:
            raise HTTPException(status_code=400, detail=f"Role tidak valid: {role}")
        return self._update(profile_id, {
            "role": normalized,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })

    def set_status(self, profile_id: str, status: str) -> ProfileResponse:
        return self._update(profile_id, {
            "status": status,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })

    def _update(self, profile_id: str, update_data: Dict[str, Any]) -> ProfileResponse:
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", profile_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Pengguna tidak ditemukan")
            return to_profile_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui data pengguna")

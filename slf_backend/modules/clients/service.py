from supabase import Client
from slf_backend.modules.clients.schemas import ClientCreate, ClientUpdate, ClientResponse
from slf_backend.core.filters import matches_search
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_clients(self, search: Optional[str] = None) -> List[ClientResponse]:
        """List clients ordered by name, searching name, city and email"""
        try:
            result = self.supabase.table("clients")\
                .select("*")\
                .order("name")\
                .execute()
            rows = result.data or []
            return [
                ClientResponse(**c) for c in rows
                if matches_search(search, c.get("name"), c.get("city"), c.get("email"))
            ]
        except Exception as e:
            logger.error(f"Error fetching clients: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data klien")

    def get_client(self, client_id: str) -> ClientResponse:
        try:
            result = self.supabase.table("clients")\
                .select("*")\
                .eq("id", client_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Klien tidak ditemukan")
            return ClientResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data klien")

    def create_client(self, client_data: ClientCreate, user_id: str) -> ClientResponse:
        try:
            insert_data = client_data.model_dump()
            insert_data["created_by"] = user_id
            result = self.supabase.table("clients").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Gagal menambahkan klien")
            logger.info(f"Client created: {result.data[0].get('id')}")
            return ClientResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating client: {e}")
            raise HTTPException(status_code=500, detail="Gagal menambahkan klien")

    def update_client(self, client_id: str, client_data: ClientUpdate) -> ClientResponse:
        try:
            update_data = client_data.model_dump(exclude_none=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("clients")\
                .update(update_data)\
                .eq("id", client_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Klien tidak ditemukan")
            return ClientResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui klien")

    def delete_client(self, client_id: str) -> bool:
        try:
            result = self.supabase.table("clients")\
                .delete()\
                .eq("id", client_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Klien tidak ditemukan")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menghapus klien")

    def list_client_projects(self, client_id: str) -> List[dict]:
        try:
            result = self.supabase.table("projects")\
                .select("id, name, status, application_type, city, created_at")\
                .eq("client_id", client_id)\
                .order("created_at", desc=True)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching projects for client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat proyek klien")

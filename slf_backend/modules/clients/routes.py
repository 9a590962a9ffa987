from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.clients.schemas import ClientCreate, ClientUpdate, ClientResponse
from slf_backend.modules.clients.service import ClientService
from slf_backend.core.dependencies import require_permission
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/clients", tags=["clients"])


def get_client_service(supabase: Client = Depends(get_supabase)) -> ClientService:
    return ClientService(supabase)


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    search: Optional[str] = None,
    user_data: Dict = Depends(require_permission("clients:read")),
    service: ClientService = Depends(get_client_service)
):
    return service.list_clients(search=search)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    client_data: ClientCreate,
    user_data: Dict = Depends(require_permission("clients:create")),
    service: ClientService = Depends(get_client_service)
):
    return service.create_client(client_data, user_data["id"])


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    user_data: Dict = Depends(require_permission("clients:read")),
    service: ClientService = Depends(get_client_service)
):
    return service.get_client(client_id)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    client_data: ClientUpdate,
    user_data: Dict = Depends(require_permission("clients:update")),
    service: ClientService = Depends(get_client_service)
):
    return service.update_client(client_id, client_data)


@router.delete("/{client_id}", status_code=204)
async def delete_client(
    client_id: str,
    user_data: Dict = Depends(require_permission("clients:delete")),
    service: ClientService = Depends(get_client_service)
):
    service.delete_client(client_id)
    return None


@router.get("/{client_id}/projects", response_model=List[dict])
async def list_client_projects(
    client_id: str,
    user_data: Dict = Depends(require_permission("clients:read")),
    service: ClientService = Depends(get_client_service)
):
    return service.list_client_projects(client_id)

from fastapi import APIRouter, Depends, UploadFile, File, Form
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.documents.schemas import (
    DocumentResponse, DocumentListResponse, DocumentVerifyRequest, UploadProgressResponse
)
from slf_backend.modules.documents.service import DocumentService
from slf_backend.core.dependencies import (
    require_permission, get_access_cache, get_accessible_project_ids, check_project_access
)
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/documents", tags=["documents"])


def get_document_service(supabase: Client = Depends(get_supabase)) -> DocumentService:
    return DocumentService(supabase)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    tab: Optional[str] = None,
    search: Optional[str] = None,
    status: Optional[str] = None,
    project_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("documents:read")),
    service: DocumentService = Depends(get_document_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    """
    Documents with project and uploader names.
    `tab` is one of all, slf, pbg, pending (pending also covers verified).
    """
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.list_documents(
        user_id=user_data["id"],
        accessible_project_ids=accessible,
        tab=tab,
        search=search,
        status=status,
        project_id=project_id,
    )


@router.get("/catalog", response_model=dict)
async def get_required_documents(
    application_category: Optional[str] = None,
    user_data: Dict = Depends(require_permission("documents:read")),
    service: DocumentService = Depends(get_document_service)
):
    return service.get_catalog(application_category)


@router.get("/progress", response_model=UploadProgressResponse)
async def get_upload_progress(
    project_id: Optional[str] = None,
    application_type: Optional[str] = None,
    user_data: Dict = Depends(require_permission("documents:upload")),
    service: DocumentService = Depends(get_document_service),
    supabase: Client = Depends(get_supabase)
):
    if project_id:
        check_project_access(project_id, user_data, supabase)
    return service.upload_progress(user_data["id"], project_id=project_id, application_type=application_type)


@router.post("/upload", response_model=DocumentResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    document_type: str = Form(...),
    project_id: Optional[str] = Form(None),
    application_type: Optional[str] = Form(None),
    user_data: Dict = Depends(require_permission("documents:upload")),
    service: DocumentService = Depends(get_document_service),
    supabase: Client = Depends(get_supabase)
):
    """Upload one required document; without project_id it belongs to the caller's new submission"""
    if project_id:
        check_project_access(project_id, user_data, supabase)
    return await service.upload_client_document(
        file, document_type, user_data, project_id=project_id or None, application_type=application_type
    )


@router.put("/{document_id}/verify", response_model=DocumentResponse)
async def verify_document(
    document_id: str,
    request: DocumentVerifyRequest,
    user_data: Dict = Depends(require_permission("documents:verify")),
    service: DocumentService = Depends(get_document_service)
):
    return service.verify_document(document_id, request, user_data["id"])


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    user_data: Dict = Depends(require_permission("documents:upload")),
    service: DocumentService = Depends(get_document_service)
):
    service.delete_document(document_id, user_data["id"])
    return None

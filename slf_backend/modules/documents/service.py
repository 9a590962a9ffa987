from supabase import Client
from slf_backend.modules.documents.schemas import (
    DocumentResponse, DocumentCounts, DocumentListResponse, DocumentVerifyRequest,
    RequiredDocumentStatus, UploadProgressResponse
)
from slf_backend.modules.notifications.service import NotificationService
from slf_backend.core.storage import DocumentStorage
from slf_backend.core.filters import matches_search, matches_filter, index_by_id, ALL
from slf_backend.config.workflow_config import (
    SLF, PBG, APPLICATION_CATEGORIES, REQUIRED_DOCUMENTS, category_of, find_required_document
)
from slf_backend.config.roles_config import ADMIN_LEAD
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, UploadFile
from datetime import datetime, timezone
import logging
import os
import time

logger = logging.getLogger(__name__)

# Statuses still waiting on a final admin decision
AWAITING_STATUSES = ("pending", "verified")


def file_extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def storage_path(folder: str, document_type: str, extension: str) -> str:
    return f"{folder}/{document_type}_{int(time.time() * 1000)}.{extension}"


def matches_tab(document: DocumentResponse, tab: Optional[str]) -> bool:
    if not tab or tab == ALL:
        return True
    if tab == "pending":
        return document.status in AWAITING_STATUSES
    return category_of(document.application_type) == tab.upper()


def count_documents(documents: List[DocumentResponse]) -> DocumentCounts:
    return DocumentCounts(
        pending=sum(1 for d in documents if d.status in AWAITING_STATUSES),
        slf=sum(1 for d in documents if category_of(d.application_type) == SLF),
        pbg=sum(1 for d in documents if category_of(d.application_type) == PBG),
    )


def upload_progress_percent(uploaded_required: int, total_required: int) -> int:
    if total_required <= 0:
        return 0
    return int(uploaded_required * 100 / total_required + 0.5)


class DocumentService:
    def __init__(self, supabase: Client, storage: Optional[DocumentStorage] = None):
        self.supabase = supabase
        self.storage = storage or DocumentStorage(supabase)
        self.notifications = NotificationService(supabase)

    def _fetch_documents(self, user_id: Optional[str], accessible_project_ids: Optional[List[str]]) -> List[Dict[str, Any]]:
        result = self.supabase.table("documents")\
            .select("*")\
            .order("created_at", desc=True)\
            .execute()
        rows = result.data or []
        if accessible_project_ids is None:
            return rows
        allowed = set(accessible_project_ids)
        return [
            d for d in rows
            if d.get("project_id") in allowed or (user_id and d.get("created_by") == user_id)
        ]

    def _enrich(self, rows: List[Dict[str, Any]]) -> List[DocumentResponse]:
        """Attach project name, application type (SLF when unknown) and uploader name"""
        project_ids = sorted({d["project_id"] for d in rows if d.get("project_id")})
        uploader_ids = sorted({d["created_by"] for d in rows if d.get("created_by")})
        projects: Dict[str, Dict[str, Any]] = {}
        uploaders: Dict[str, Dict[str, Any]] = {}
        if project_ids:
            projects = index_by_id(
                self.supabase.table("projects").select("id, name, application_type").in_("id", project_ids).execute().data
            )
        if uploader_ids:
            uploaders = index_by_id(
                self.supabase.table("profiles").select("id, full_name, email").in_("id", uploader_ids).execute().data
            )

        documents = []
        for row in rows:
            project = projects.get(row.get("project_id")) or {}
            uploader = uploaders.get(row.get("created_by")) or {}
            metadata = row.get("metadata") or {}
            documents.append(DocumentResponse(**{
                **row,
                "status": row.get("status") or "pending",
                "project_name": project.get("name") or "-",
                "application_type": project.get("application_type") or metadata.get("application_type") or SLF,
                "uploader_name": uploader.get("full_name") or uploader.get("email") or "-",
            }))
        return documents

    def list_documents(
        self,
        user_id: Optional[str] = None,
        accessible_project_ids: Optional[List[str]] = None,
        tab: Optional[str] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> DocumentListResponse:
        """Documents newest first; counts are computed before the tab/search/status filters."""
        try:
            documents = self._enrich(self._fetch_documents(user_id, accessible_project_ids))
        except Exception as e:
            logger.error(f"Error fetching documents: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat dokumen")

        if project_id:
            documents = [d for d in documents if d.project_id == project_id]
        counts = count_documents(documents)
        filtered = [
            d for d in documents
            if matches_tab(d, tab)
            and matches_search(search, d.name, d.project_name, d.uploader_name)
            and matches_filter(d.status, status)
        ]
        return DocumentListResponse(documents=filtered, counts=counts)

    def get_document(self, document_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("documents")\
                .select("*")\
                .eq("id", document_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat dokumen")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Dokumen tidak ditemukan")
        return result.data

    def get_catalog(self, application_category: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
        if application_category:
            if application_category not in APPLICATION_CATEGORIES:
                raise HTTPException(status_code=400, detail="Kategori permohonan tidak valid")
            return {application_category: REQUIRED_DOCUMENTS[application_category]}
        return REQUIRED_DOCUMENTS

    def _project_category(self, project_id: Optional[str], fallback: Optional[str]) -> str:
        if project_id:
            result = self.supabase.table("projects")\
                .select("application_type")\
                .eq("id", project_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Proyek tidak ditemukan")
            category = category_of(result.data.get("application_type"))
            if category:
                return category
        return category_of(fallback) or SLF

    def _client_documents(self, user_id: str, project_id: Optional[str]) -> List[Dict[str, Any]]:
        query = self.supabase.table("documents")\
            .select("*")\
            .eq("created_by", user_id)
        if project_id:
            query = query.eq("project_id", project_id)
        else:
            query = query.is_("project_id", "null")
        return query.order("created_at", desc=True).execute().data or []

    def upload_progress(
        self, user_id: str, project_id: Optional[str] = None, application_type: Optional[str] = None
    ) -> UploadProgressResponse:
        """Share of required catalog documents the client has uploaded for a project or a new submission"""
        try:
            category = self._project_category(project_id, application_type)
            uploaded = {}
            for doc in self._client_documents(user_id, project_id):
                uploaded.setdefault(doc.get("document_type"), doc)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing upload progress for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat dokumen")

        items = []
        for entry in REQUIRED_DOCUMENTS[category]:
            document = uploaded.get(entry["id"])
            items.append(RequiredDocumentStatus(
                **entry,
                status=(document.get("status") or "pending") if document else "missing",
                document=document,
            ))
        required = [item for item in items if item.required]
        uploaded_required = sum(1 for item in required if item.status != "missing")
        return UploadProgressResponse(
            application_category=category,
            project_id=project_id,
            progress=upload_progress_percent(uploaded_required, len(required)),
            uploaded_required=uploaded_required,
            total_required=len(required),
            documents=items,
        )

    async def upload_client_document(
        self,
        file: UploadFile,
        document_type: str,
        user_data: Dict[str, Any],
        project_id: Optional[str] = None,
        application_type: Optional[str] = None,
    ) -> DocumentResponse:
        """
        Store a client's required document and upsert its row.
        One row per (uploader, document_type, project or new submission); re-uploading replaces it
        and puts it back to pending. Admin leads are notified best effort.
        """
        user_id = user_data["id"]
        category = self._project_category(project_id, application_type)
        entry = find_required_document(category, document_type)
        if not entry:
            raise HTTPException(status_code=400, detail="Jenis dokumen tidak dikenal")

        extension = file_extension(file.filename)
        if extension not in entry["formats"]:
            raise HTTPException(
                status_code=400,
                detail=f"Format tidak didukung. Gunakan: {', '.join(entry['formats']).upper()}"
            )
        content = await file.read()
        if len(content) > entry["max_size"] * 1024 * 1024:
            raise HTTPException(status_code=400, detail=f"Ukuran file maksimal {entry['max_size']}MB")

        folder = project_id or f"client_{user_id}"
        path = storage_path(folder, entry["id"], extension)
        try:
            url = self.storage.upload(path, content, file.content_type or "application/octet-stream")
        except Exception as e:
            logger.error(f"Document upload failed ({path}): {e}")
            raise HTTPException(status_code=500, detail=f"Gagal mengunggah: {str(e)}")

        document_data = {
            "project_id": project_id,
            "name": entry["name"],
            "type": extension,
            "url": url,
            "status": "pending",
            "document_type": entry["id"],
            "created_by": user_id,
            "metadata": {
                "category": entry["category"],
                "required": entry["required"],
                "original_name": file.filename,
                "storage_path": path,
                "size": len(content),
                "uploaded_at": datetime.now(timezone.utc).isoformat(),
                "application_type": application_type or category,
            },
        }
        try:
            existing = self._client_documents(user_id, project_id)
            existing = [d for d in existing if d.get("document_type") == entry["id"]]
            if existing:
                result = self.supabase.table("documents")\
                    .update(document_data)\
                    .eq("id", existing[0]["id"])\
                    .execute()
            else:
                result = self.supabase.table("documents").insert(document_data).execute()
        except Exception as e:
            logger.error(f"Error saving document {entry['id']} for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menyimpan dokumen")
        if not result.data:
            raise HTTPException(status_code=500, detail="Gagal menyimpan dokumen")
        if existing:
            self._remove_stored_file(existing[0], keep=path)

        uploader = user_data.get("full_name") or user_data.get("email")
        self.notifications.notify_role(
            ADMIN_LEAD,
            "document_uploaded",
            f"Client {uploader} mengunggah dokumen: {entry['name']}",
            sender_id=user_id,
            project_id=project_id,
        )
        logger.info(f"Document {entry['id']} uploaded by {user_id} to {path}")
        return self._enrich(result.data[:1])[0]

    def verify_document(self, document_id: str, request: DocumentVerifyRequest, user_id: str) -> DocumentResponse:
        self.get_document(document_id)
        now = datetime.now(timezone.utc).isoformat()
        if request.action == "approve":
            update_data = {
                "status": "approved",
                "approved_by_id": user_id,
                "approved_at": now,
                "approval_notes": request.notes,
            }
        else:
            reason = (request.rejection_reason or "").strip()
            if not reason:
                raise HTTPException(status_code=400, detail="Alasan penolakan harus diisi")
            update_data = {
                "status": "rejected",
                "rejected_by_id": user_id,
                "rejected_at": now,
                "rejection_reason": reason,
                "approval_notes": request.notes,
            }
        update_data["updated_at"] = now
        try:
            result = self.supabase.table("documents")\
                .update(update_data)\
                .eq("id", document_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error verifying document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui status dokumen")
        if not result.data:
            raise HTTPException(status_code=404, detail="Dokumen tidak ditemukan")
        logger.info(f"Document {document_id} {update_data['status']} by {user_id}")
        return self._enrich(result.data[:1])[0]

    def _remove_stored_file(self, document: Dict[str, Any], keep: Optional[str] = None) -> None:
        stored = (document.get("metadata") or {}).get("storage_path")
        if stored and stored != keep:
            if not self.storage.delete(stored):
                logger.warning(f"Stored file {stored} of document {document.get('id')} was not removed")

    def delete_document(self, document_id: str, user_id: str) -> bool:
        """Uploaders may withdraw their own documents while still pending"""
        document = self.get_document(document_id)
        if document.get("created_by") != user_id:
            raise HTTPException(status_code=403, detail="Anda hanya dapat menghapus dokumen milik sendiri")
        if (document.get("status") or "pending") != "pending":
            raise HTTPException(status_code=400, detail="Hanya dokumen dengan status pending yang bisa dihapus")
        self._remove_stored_file(document)
        try:
            result = self.supabase.table("documents").delete().eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"Error deleting document {document_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menghapus dokumen")
        return len(result.data or []) > 0

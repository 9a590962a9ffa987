from supabase import Client
from slf_backend.modules.payments.schemas import PaymentResponse, PaymentListResponse, PaymentVerifyRequest
from slf_backend.modules.notifications.service import NotificationService
from slf_backend.core.storage import DocumentStorage
from slf_backend.core.filters import matches_search, matches_filter
from slf_backend.config.roles_config import ADMIN_LEAD
from slf_backend.config import settings
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, UploadFile
from datetime import date, datetime, timezone
import logging
import os
import time

logger = logging.getLogger(__name__)

PROOF_CONTENT_TYPES = ["image/jpeg", "image/png", "image/jpg", "application/pdf"]

# verify action -> verification_status
VERIFY_ACTIONS = {
    "approve": "verified",
    "reject": "rejected",
    "reset": "pending",
}

PAYMENT_SELECT = "*, projects (id, name), clients (id, name)"


def format_rupiah(amount: float) -> str:
    return "Rp " + f"{amount:,.0f}".replace(",", ".")


def to_payment_response(row: Dict[str, Any]) -> PaymentResponse:
    project = row.get("projects") or {}
    client = row.get("clients") or {}
    data = {k: v for k, v in row.items() if k not in ("projects", "clients")}
    return PaymentResponse(
        **data,
        project_name=project.get("name") or "-",
        client_name=client.get("name") or "-",
    )


class PaymentService:
    def __init__(self, supabase: Client, storage: Optional[DocumentStorage] = None):
        self.supabase = supabase
        self.storage = storage or DocumentStorage(supabase)
        self.notifications = NotificationService(supabase)

    def list_payments(
        self,
        accessible_project_ids: Optional[List[str]] = None,
        user_data: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> PaymentListResponse:
        """Payments newest first with project/client names; pending_count ignores the search and status filters"""
        try:
            result = self.supabase.table("payments")\
                .select(PAYMENT_SELECT)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching payments: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data pembayaran")

        rows = result.data or []
        if accessible_project_ids is not None:
            allowed = set(accessible_project_ids)
            user_id = (user_data or {}).get("id")
            client_id = (user_data or {}).get("client_id")
            rows = [
                p for p in rows
                if p.get("project_id") in allowed
                or (user_id and p.get("created_by") == user_id)
                or (client_id and p.get("client_id") == client_id)
            ]
        payments = [to_payment_response(p) for p in rows]
        pending_count = sum(1 for p in payments if p.verification_status == "pending")
        filtered = [
            p for p in payments
            if matches_search(search, p.project_name, p.client_name)
            and matches_filter(p.verification_status, status)
        ]
        return PaymentListResponse(payments=filtered, pending_count=pending_count)

    def get_payment(self, payment_id: str) -> PaymentResponse:
        try:
            result = self.supabase.table("payments")\
                .select(PAYMENT_SELECT)\
                .eq("id", payment_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching payment {payment_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data pembayaran")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Pembayaran tidak ditemukan")
        return to_payment_response(result.data)

    async def upload_proof(
        self,
        file: UploadFile,
        amount: float,
        payment_date: Optional[date],
        user_data: Dict[str, Any],
        project_id: Optional[str] = None,
    ) -> PaymentResponse:
        """Client payment proof: validated, stored under payments/, inserted as pending and announced to admin leads"""
        if amount is None or amount <= 0:
            raise HTTPException(status_code=400, detail="Jumlah pembayaran harus lebih dari 0")
        if not payment_date:
            raise HTTPException(status_code=400, detail="Tanggal pembayaran harus diisi")
        if file.content_type not in PROOF_CONTENT_TYPES:
            raise HTTPException(status_code=400, detail="Hanya file JPG, PNG, atau PDF yang diizinkan")
        content = await file.read()
        if len(content) > settings.payment_proof_max_mb * 1024 * 1024:
            raise HTTPException(status_code=400, detail=f"Ukuran file maksimal {settings.payment_proof_max_mb}MB")

        extension = os.path.splitext(file.filename or "")[1].lstrip(".") or "pdf"
        path = f"payments/{project_id or 'new'}_{int(time.time() * 1000)}.{extension}"
        try:
            proof_url = self.storage.upload(path, content, file.content_type)
        except Exception as e:
            logger.error(f"Payment proof upload failed ({path}): {e}")
            raise HTTPException(status_code=500, detail=f"Gagal mengupload bukti pembayaran: {str(e)}")

        user_id = user_data["id"]
        try:
            result = self.supabase.table("payments").insert({
                "project_id": project_id,
                "amount": amount,
                "payment_date": payment_date.isoformat(),
                "proof_url": proof_url,
                "verification_status": "pending",
                "client_id": user_data.get("client_id"),
                "created_by": user_id,
            }).execute()
        except Exception as e:
            logger.error(f"Payment insert error: {e}")
            raise HTTPException(status_code=500, detail="Gagal menyimpan data pembayaran")
        if not result.data:
            raise HTTPException(status_code=500, detail="Gagal menyimpan data pembayaran")

        payment = result.data[0]
        target = "Pengajuan Baru" if not project_id else f"proyek {project_id}"
        self.notifications.notify_role(
            ADMIN_LEAD,
            "payment_uploaded",
            f"Bukti pembayaran sebesar {format_rupiah(amount)} telah diupload untuk {target}",
            sender_id=user_id,
            project_id=project_id,
        )
        logger.info(f"Payment proof uploaded: {payment.get('id')} by {user_id}")
        return to_payment_response(payment)

    def verify_payment(self, payment_id: str, request: PaymentVerifyRequest, user_id: str) -> PaymentResponse:
        """Direct status update; reset puts the payment back to pending"""
        new_status = VERIFY_ACTIONS[request.action]
        update_data = {
            "verification_status": new_status,
            "verified_by": user_id,
            "verified_at": datetime.now(timezone.utc).isoformat(),
            "notes": request.notes,
        }
        try:
            result = self.supabase.table("payments")\
                .update(update_data)\
                .eq("id", payment_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error verifying payment {payment_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui status pembayaran")
        if not result.data:
            raise HTTPException(status_code=404, detail="Pembayaran tidak ditemukan")
        logger.info(f"Payment {payment_id} -> {new_status} by {user_id}")
        return to_payment_response(result.data[0])

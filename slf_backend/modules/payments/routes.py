from fastapi import APIRouter, Depends, UploadFile, File, Form
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.payments.schemas import PaymentResponse, PaymentListResponse, PaymentVerifyRequest
from slf_backend.modules.payments.service import PaymentService
from slf_backend.core.dependencies import (
    require_permission, get_access_cache, get_accessible_project_ids, check_project_access,
    forbidden, PROJECT_WIDE_ROLES
)
from supabase import Client
from typing import Dict, Optional
from datetime import date

router = APIRouter(prefix="/payments", tags=["payments"])


def get_payment_service(supabase: Client = Depends(get_supabase)) -> PaymentService:
    return PaymentService(supabase)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    search: Optional[str] = None,
    status: Optional[str] = None,
    user_data: Dict = Depends(require_permission("payments:read")),
    service: PaymentService = Depends(get_payment_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.list_payments(
        accessible_project_ids=accessible,
        user_data=user_data,
        search=search,
        status=status,
    )


@router.post("/upload", response_model=PaymentResponse, status_code=201)
async def upload_payment_proof(
    file: UploadFile = File(...),
    amount: float = Form(...),
    payment_date: Optional[date] = Form(None),
    project_id: Optional[str] = Form(None),
    user_data: Dict = Depends(require_permission("payments:upload")),
    service: PaymentService = Depends(get_payment_service),
    supabase: Client = Depends(get_supabase)
):
    """Upload a transfer proof (JPG, PNG or PDF); omit project_id for a new submission"""
    if project_id:
        check_project_access(project_id, user_data, supabase)
    return await service.upload_proof(file, amount, payment_date, user_data, project_id=project_id or None)


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: str,
    user_data: Dict = Depends(require_permission("payments:read")),
    service: PaymentService = Depends(get_payment_service),
    supabase: Client = Depends(get_supabase)
):
    payment = service.get_payment(payment_id)
    if payment.created_by == user_data["id"]:
        return payment
    if payment.project_id:
        check_project_access(payment.project_id, user_data, supabase)
    elif user_data.get("role") not in PROJECT_WIDE_ROLES and not (
        user_data.get("client_id") and payment.client_id == user_data.get("client_id")
    ):
        # new-submission proofs belong to their uploader and client only
        raise forbidden("Anda tidak memiliki akses ke pembayaran ini")
    return payment


@router.put("/{payment_id}/verify", response_model=PaymentResponse)
async def verify_payment(
    payment_id: str,
    request: PaymentVerifyRequest,
    user_data: Dict = Depends(require_permission("payments:verify")),
    service: PaymentService = Depends(get_payment_service)
):
    return service.verify_payment(payment_id, request, user_data["id"])

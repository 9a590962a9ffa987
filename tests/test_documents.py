"""Tests for document listing, client uploads, verification and deletion."""

import pytest
from fastapi import HTTPException

from slf_backend.modules.documents.schemas import DocumentVerifyRequest
from slf_backend.modules.documents.service import DocumentService, upload_progress_percent


@pytest.fixture
def documents_db(fake_db):
    fake_db.seed(
        "projects",
        {"id": "p1", "name": "Gedung A", "application_type": "SLF_BARU", "client_id": "client-1"},
        {"id": "p2", "name": "Gudang B", "application_type": "PBG_BARU", "client_id": "client-2"},
    )
    fake_db.seed("profiles", {"id": "u1", "full_name": "Klien Satu", "role": "client"})
    fake_db.seed(
        "documents",
        {"id": "d1", "project_id": "p1", "name": "KTP Pemohon", "status": "pending", "created_by": "u1",
         "document_type": "ktp", "created_at": "2024-01-03T00:00:00Z"},
        {"id": "d2", "project_id": "p2", "name": "Gambar MEP", "status": "verified", "created_by": "ghost",
         "document_type": "gambar_mep", "created_at": "2024-01-02T00:00:00Z"},
        {"id": "d3", "project_id": None, "name": "NPWP", "status": "approved", "created_by": "u1",
         "document_type": "npwp", "created_at": "2024-01-01T00:00:00Z"},
    )
    return fake_db


class TestListDocuments:
    def test_enrichment_and_defaults(self, documents_db):
        result = DocumentService(documents_db).list_documents()
        docs = {d.id: d for d in result.documents}

        assert docs["d1"].project_name == "Gedung A"
        assert docs["d1"].uploader_name == "Klien Satu"
        assert docs["d2"].application_type == "PBG_BARU"
        assert docs["d2"].uploader_name == "-"
        assert docs["d3"].project_name == "-"
        assert docs["d3"].application_type == "SLF"

    def test_counts_and_pending_tab(self, documents_db):
        service = DocumentService(documents_db)

        result = service.list_documents(tab="pending")

        assert result.counts.model_dump() == {"pending": 2, "slf": 2, "pbg": 1}
        assert [d.id for d in result.documents] == ["d1", "d2"]

    def test_pbg_tab_and_search(self, documents_db):
        service = DocumentService(documents_db)

        assert [d.id for d in service.list_documents(tab="pbg").documents] == ["d2"]
        assert [d.id for d in service.list_documents(search="klien satu").documents] == ["d1", "d3"]

    def test_scoped_list_keeps_own_unassigned_documents(self, documents_db):
        result = DocumentService(documents_db).list_documents(user_id="u1", accessible_project_ids=["p1"])
        assert [d.id for d in result.documents] == ["d1", "d3"]


class TestVerifyAndDelete:
    def test_approve_sets_approver(self, documents_db):
        doc = DocumentService(documents_db).verify_document(
            "d1", DocumentVerifyRequest(action="approve", notes="Lengkap"), "admin-1"
        )

        assert doc.status == "approved"
        assert doc.approved_by_id == "admin-1"
        assert doc.approved_at is not None
        assert doc.approval_notes == "Lengkap"

    def test_reject_requires_reason(self, documents_db):
        service = DocumentService(documents_db)
        with pytest.raises(HTTPException) as exc:
            service.verify_document("d1", DocumentVerifyRequest(action="reject"), "admin-1")
        assert exc.value.status_code == 400

        doc = service.verify_document(
            "d1", DocumentVerifyRequest(action="reject", rejection_reason="Buram"), "admin-1"
        )
        assert doc.status == "rejected"
        assert doc.rejected_by_id == "admin-1"
        assert doc.rejection_reason == "Buram"

    def test_delete_only_own_pending(self, documents_db):
        service = DocumentService(documents_db)

        with pytest.raises(HTTPException) as not_owner:
            service.delete_document("d1", "someone-else")
        with pytest.raises(HTTPException) as not_pending:
            service.delete_document("d3", "u1")

        assert not_owner.value.status_code == 403
        assert not_pending.value.status_code == 400
        assert service.delete_document("d1", "u1") is True
        assert [d["id"] for d in documents_db.rows("documents")] == ["d2", "d3"]


class TestClientUpload:
    def test_upload_new_submission_and_notify_admin_leads(self, test_client, fake_db, login_as):
        fake_db.seed("profiles", {"id": "al-1", "role": "admin_lead"}, {"id": "al-2", "role": "admin_lead"})
        login_as("client", user_id="u1", full_name="Klien Satu")

        response = test_client.post(
            "/api/v1/documents/upload",
            files={"file": ("ktp.pdf", b"%PDF-1.4 test", "application/pdf")},
            data={"document_type": "ktp", "application_type": "SLF_BARU"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["project_id"] is None
        assert body["url"].startswith("https://storage.test/documents/client_u1/ktp_")
        assert body["url"].endswith(".pdf")
        notifications = fake_db.rows("notifications")
        assert sorted(n["recipient_id"] for n in notifications) == ["al-1", "al-2"]
        assert notifications[0]["message"] == "Client Klien Satu mengunggah dokumen: KTP Pemohon"

    def test_reupload_replaces_existing_row(self, test_client, fake_db, login_as):
        login_as("client", user_id="u1")
        for _ in range(2):
            test_client.post(
                "/api/v1/documents/upload",
                files={"file": ("npwp.png", b"png-bytes", "image/png")},
                data={"document_type": "npwp"},
            )

        rows = fake_db.rows("documents")
        assert len(rows) == 1
        assert rows[0]["type"] == "png"
        assert list(fake_db.storage.objects) == [("documents", rows[0]["metadata"]["storage_path"])]

    def test_delete_removes_stored_file(self, test_client, fake_db, login_as):
        login_as("client", user_id="c-1")
        uploaded = test_client.post(
            "/api/v1/documents/upload",
            files={"file": ("ktp.pdf", b"%PDF-1.4", "application/pdf")},
            data={"document_type": "ktp"},
        ).json()
        assert len(fake_db.storage.objects) == 1

        response = test_client.delete(f"/api/v1/documents/{uploaded['id']}")

        assert response.status_code == 204
        assert fake_db.storage.objects == {}
        assert fake_db.rows("documents") == []

    def test_delete_survives_storage_failure(self, documents_db):
        documents_db.tables["documents"][0]["metadata"] = {"storage_path": "p1/ktp_1.pdf"}
        service = DocumentService(documents_db)
        service.storage.delete = lambda path: False

        assert service.delete_document("d1", "u1") is True

    def test_rejects_wrong_format(self, test_client, login_as):
        login_as("client", user_id="u1")

        response = test_client.post(
            "/api/v1/documents/upload",
            files={"file": ("sertifikat.jpg", b"jpeg", "image/jpeg")},
            data={"document_type": "sertifikat_tanah"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Format tidak didukung. Gunakan: PDF"

    def test_rejects_oversized_file(self, test_client, login_as):
        login_as("client", user_id="u1")

        response = test_client.post(
            "/api/v1/documents/upload",
            files={"file": ("ktp.pdf", b"0" * (5 * 1024 * 1024 + 1), "application/pdf")},
            data={"document_type": "ktp"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Ukuran file maksimal 5MB"

    def test_progress_counts_required_documents(self, fake_db):
        fake_db.seed(
            "documents",
            {"id": "x1", "project_id": None, "created_by": "u1", "document_type": "ktp", "status": "pending"},
            {"id": "x2", "project_id": None, "created_by": "u1", "document_type": "foto_interior", "status": "pending"},
        )

        progress = DocumentService(fake_db).upload_progress("u1", application_type="SLF")

        assert progress.total_required == 8
        assert progress.uploaded_required == 1
        assert progress.progress == 13

    def test_progress_rounding(self):
        assert upload_progress_percent(1, 8) == 13
        assert upload_progress_percent(0, 0) == 0
        assert upload_progress_percent(9, 9) == 100

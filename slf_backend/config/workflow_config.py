"""
Workflow Configuration
Status enums, SLF/PBG application types, default timeline phases and the
required-document catalogs used by the project wizard, timeline and uploads.
"""

SLF = "SLF"
PBG = "PBG"
APPLICATION_CATEGORIES = [SLF, PBG]

# application_category -> allowed application_type values
APPLICATION_TYPES = {
    SLF: {
        "SLF_BARU": "Permohonan Baru",
        "SLF_PERPANJANGAN": "Perpanjangan",
        "SLF_PERUBAHAN": "Perubahan",
    },
    PBG: {
        "PBG_BARU": "Permohonan Baru",
        "PBG_PERUBAHAN": "Perubahan",
    },
}

PROJECT_STATUS_LABELS = {
    "draft": "Draft",
    "submitted": "Submitted",
    "project_lead_review": "Project Lead Review",
    "inspection_scheduled": "Inspection Scheduled",
    "inspection_in_progress": "Inspection In Progress",
    "report_draft": "Report Draft",
    "head_consultant_review": "Head Consultant Review",
    "client_review": "Client Review",
    "government_submitted": "Government Submitted",
    "slf_issued": "SLF Issued",
    "completed": "Completed",
    "cancelled": "Cancelled",
}

PROJECT_PRIORITIES = ["low", "medium", "high", "urgent"]

DOCUMENT_STATUSES = ["pending", "verified", "approved", "rejected"]
PAYMENT_STATUSES = ["pending", "verified", "rejected"]
SCHEDULE_STATUSES = ["scheduled", "in_progress", "completed", "cancelled"]
SCHEDULE_TYPES = ["inspection", "meeting", "document_review", "site_visit", "submission", "other"]

DEFAULT_PHASES = {
    SLF: [
        {"phase": 1, "name": "Persiapan Dokumen", "duration": 7, "description": "Pengumpulan dan verifikasi dokumen persyaratan"},
        {"phase": 2, "name": "Inspeksi Lapangan", "duration": 5, "description": "Kunjungan dan pemeriksaan bangunan"},
        {"phase": 3, "name": "Penyusunan Laporan", "duration": 10, "description": "Analisis dan penyusunan laporan teknis"},
        {"phase": 4, "name": "Review & Approval", "duration": 7, "description": "Review internal dan persetujuan"},
        {"phase": 5, "name": "Pengajuan Pemerintah", "duration": 14, "description": "Submit ke DPKP dan penerbitan SLF"},
    ],
    PBG: [
        {"phase": 1, "name": "Persiapan Dokumen", "duration": 7, "description": "Pengumpulan dokumen persyaratan PBG"},
        {"phase": 2, "name": "Review Teknis", "duration": 10, "description": "Pemeriksaan kelengkapan teknis"},
        {"phase": 3, "name": "Konsultasi Publik", "duration": 7, "description": "Proses konsultasi publik (jika diperlukan)"},
        {"phase": 4, "name": "Persetujuan Teknis", "duration": 14, "description": "Review dan persetujuan teknis"},
        {"phase": 5, "name": "Penerbitan PBG", "duration": 7, "description": "Penerbitan Persetujuan Bangunan Gedung"},
    ],
}

# Required documents per application category; max_size in MB
REQUIRED_DOCUMENTS = {
    SLF: [
        {"id": "ktp", "name": "KTP Pemohon", "category": "Identitas", "required": True, "formats": ["pdf", "jpg", "png"], "max_size": 5},
        {"id": "npwp", "name": "NPWP", "category": "Identitas", "required": True, "formats": ["pdf", "jpg", "png"], "max_size": 5},
        {"id": "sertifikat_tanah", "name": "Sertifikat Tanah/Bukti Kepemilikan", "category": "Legalitas", "required": True, "formats": ["pdf"], "max_size": 10},
        {"id": "imb_lama", "name": "IMB/PBG Lama", "category": "Perizinan", "required": True, "formats": ["pdf"], "max_size": 10},
        {"id": "gambar_terbangun", "name": "Gambar As-Built Drawing", "category": "Teknis", "required": True, "formats": ["pdf", "dwg"], "max_size": 20},
        {"id": "spesifikasi_teknis", "name": "Spesifikasi Teknis Bangunan", "category": "Teknis", "required": True, "formats": ["pdf"], "max_size": 10},
        {"id": "foto_bangunan", "name": "Foto Bangunan (Tampak Depan)", "category": "Dokumentasi", "required": True, "formats": ["jpg", "png"], "max_size": 10},
        {"id": "foto_interior", "name": "Foto Interior", "category": "Dokumentasi", "required": False, "formats": ["jpg", "png"], "max_size": 10},
        {"id": "surat_pernyataan", "name": "Surat Pernyataan Kelaikan", "category": "Administrasi", "required": True, "formats": ["pdf"], "max_size": 5},
        {"id": "laporan_teknis", "name": "Laporan Teknis (jika ada)", "category": "Teknis", "required": False, "formats": ["pdf"], "max_size": 20},
    ],
    PBG: [
        {"id": "ktp_pbg", "name": "KTP Pemohon", "category": "Identitas", "required": True, "formats": ["pdf", "jpg", "png"], "max_size": 5},
        {"id": "npwp_pbg", "name": "NPWP", "category": "Identitas", "required": True, "formats": ["pdf", "jpg", "png"], "max_size": 5},
        {"id": "bukti_kepemilikan", "name": "Bukti Kepemilikan Tanah", "category": "Legalitas", "required": True, "formats": ["pdf"], "max_size": 10},
        {"id": "gambar_rencana", "name": "Gambar Rencana Arsitektur", "category": "Teknis", "required": True, "formats": ["pdf", "dwg"], "max_size": 20},
        {"id": "gambar_struktur", "name": "Gambar Rencana Struktur", "category": "Teknis", "required": True, "formats": ["pdf", "dwg"], "max_size": 20},
        {"id": "gambar_mep", "name": "Gambar MEP", "category": "Teknis", "required": True, "formats": ["pdf", "dwg"], "max_size": 20},
        {"id": "perhitungan_struktur", "name": "Perhitungan Struktur", "category": "Teknis", "required": True, "formats": ["pdf"], "max_size": 20},
        {"id": "sppl", "name": "SPPL/UKL-UPL/AMDAL", "category": "Lingkungan", "required": True, "formats": ["pdf"], "max_size": 10},
        {"id": "surat_permohonan", "name": "Surat Permohonan PBG", "category": "Administrasi", "required": True, "formats": ["pdf"], "max_size": 5},
    ],
}


def category_of(application_type):
    """SLF_BARU -> SLF; None for unknown values"""
    if not application_type:
        return None
    for category, types in APPLICATION_TYPES.items():
        if application_type == category or application_type in types:
            return category
    return None


def project_status_label(status):
    return PROJECT_STATUS_LABELS.get(status, status)


def find_required_document(category, document_type):
    for doc in REQUIRED_DOCUMENTS.get(category, []):
        if doc["id"] == document_type:
            return doc
    return None

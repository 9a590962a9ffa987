# Supabase table: documents
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

documents:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, nullable for new submissions)
- name: text - catalog name of the document
- type: text - file extension
- url: text - public URL in storage
- document_type: text - catalog id from REQUIRED_DOCUMENTS (ktp, npwp, ...)
- status: text (default: 'pending') - pending, verified, approved, rejected
- metadata: jsonb - category, required, original_name, size, uploaded_at, application_type
- created_by: uuid (foreign key to profiles.id)
- approved_by_id: uuid (nullable)
- approved_at: timestamp (nullable)
- rejected_by_id: uuid (nullable)
- rejected_at: timestamp (nullable)
- rejection_reason: text (nullable)
- approval_notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Storage: bucket `documents`, object path <project_id | client_<user_id>>/<document_type>_<epoch_ms>.<ext>
"""

# Supabase table: payments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

payments:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, nullable for new submissions)
- client_id: uuid (foreign key to clients.id, nullable)
- amount: numeric (> 0)
- payment_date: date
- proof_url: text - public URL of the uploaded proof
- verification_status: text (default: 'pending') - pending, verified, rejected
- verified_by: uuid (foreign key to profiles.id, nullable)
- verified_at: timestamp (nullable)
- notes: text (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())

Storage: bucket `documents`, object path payments/<project_id | new>_<epoch_ms>.<ext>
"""

# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text
- full_name: text (nullable)
- role: text (not null, default: 'client') - superadmin, head_consultant, admin_lead,
  admin_team, project_lead, inspector, drafter, client
- status: text (default: 'pending') - pending, approved, rejected, suspended
- client_id: uuid (nullable, references clients.id) - set for client users
- phone_number: text (nullable)
- specialization: text (nullable) - struktur, arsitektur, mep (inspectors)
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

# Supabase table: clients
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- name: text (not null) - company or owner name
- email: text (nullable)
- phone: text (nullable)
- address: text (nullable)
- city: text (nullable)
- npwp: text (nullable) - tax id
- contact_person: text (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""

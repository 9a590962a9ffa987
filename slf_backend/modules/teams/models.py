# Supabase table: project_teams
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

project_teams:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id)
- user_id: uuid (foreign key to profiles.id)
- role: text - role within the project (project_lead, inspector, drafter, admin_team)
- created_at: timestamp (default: now())

One row per (project_id, user_id, role).
"""

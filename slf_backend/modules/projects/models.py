# Supabase tables: projects, project_phases
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- name: text (not null)
- application_type: text - SLF_BARU, SLF_PERPANJANGAN, SLF_PERUBAHAN, PBG_BARU, PBG_PERUBAHAN
- client_id: uuid (foreign key to clients.id)
- project_lead_id: uuid (foreign key to profiles.id)
- location: text
- city: text
- description: text (nullable)
- priority: text (default: 'medium') - low, medium, high, urgent
- estimated_duration: integer - days, sum of phase durations
- status: text (default: 'draft') - see PROJECT_STATUS_LABELS in config/workflow_config.py
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

project_phases:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id)
- phase: integer
- phase_name: text
- description: text (nullable)
- estimated_duration: integer - days
- status: text - pending, in_progress, completed
- order_index: integer
"""

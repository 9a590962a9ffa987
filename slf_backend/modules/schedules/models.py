# Supabase table: schedules
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

schedules:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id)
- schedule_type: text - inspection, meeting, document_review, site_visit, submission, other
- title: text (not null)
- description: text (nullable)
- schedule_date: timestamp
- location: text (nullable)
- assigned_to: uuid (foreign key to profiles.id, nullable)
- status: text (default: 'scheduled') - scheduled, in_progress, completed, cancelled
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
"""

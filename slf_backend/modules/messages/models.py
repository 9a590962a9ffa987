# Supabase table: messages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

messages:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id)
- sender_id: uuid (foreign key to profiles.id)
- recipient_id: uuid (foreign key to profiles.id, nullable)
- message: text (not null)
- message_type: text (default: 'text') - text, system, document, payment
- read_at: timestamp (nullable)
- created_at: timestamp (default: now())

Older conversations were stored as notifications rows whose type is one of
NOTIFICATION_MESSAGE_TYPES; threads read both tables.
"""

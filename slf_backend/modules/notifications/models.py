# Supabase table: notifications
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

notifications:
- id: uuid (primary key)
- recipient_id: uuid (foreign key to profiles.id)
- sender_id: uuid (foreign key to profiles.id, nullable)
- project_id: uuid (foreign key to projects.id, nullable)
- type: text - document_uploaded, payment_uploaded, message_to_client, message_from_client, ...
- message: text
- read: boolean (default: false)
- created_at: timestamp (default: now())

Rows whose type is one of NOTIFICATION_MESSAGE_TYPES are legacy chat messages
and are merged into project threads by the messages module.
"""

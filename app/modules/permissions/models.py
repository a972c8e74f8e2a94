# Supabase table: permissions
# This file documents the expected database schema
# Actual operations are handled via app.database.store.Store in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null) - capability label matched by the authorization
  resolver, e.g. "CreateUser", "ViewGroup"
- description: text (nullable)
- active: boolean (not null, default: true) - soft delete flag
- created_at: timestamp (default: now())
- unique index on (name) where active
"""

# Supabase tables: groups, group_permissions
# This file documents the expected database schema
# Actual operations are handled via app.database.store.Store in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null)
- description: text (nullable)
- active: boolean (not null, default: true) - soft delete flag
- created_at: timestamp (default: now())

group_permissions:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (group_id, permission_id)
"""

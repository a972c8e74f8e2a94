# Supabase tables: users, user_groups, user_permissions
# This file documents the expected database schema
# Actual operations are handled via app.database.store.Store in service.py
# Passwords are handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, default: gen_random_uuid())
- email: text (nullable, unique among active users)
- phone: text (nullable, unique among active users) - E.164
- first_name: text (nullable)
- middle_name: text (nullable)
- last_name: text (nullable)
- active: boolean (not null, default: true) - soft delete flag
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_groups:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- group_id: uuid (foreign key to groups.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (user_id, group_id)

user_permissions:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (user_id, permission_id)

Note: password hashes live in Supabase Auth's auth.users, keyed by the same
email/phone. This table only stores profile and activation state.
"""

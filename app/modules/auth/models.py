# Supabase Auth
# Credentials never touch the application tables. Supabase Auth handles:
# - Password hashing and verification (sign_up / sign_in_with_password)
# - SMS one-time codes (sign_in_with_otp / verify_otp)
# - Google ID-token verification (sign_in_with_id_token)
# - JWT access token issuance and validation (get_user)

"""
Each authenticated Supabase identity is mapped to a row in the application's
users table by email or phone. Authorization only ever sees that row's id.

Super users are flagged server-side in auth.users.app_metadata
({"type": "super_user"}) and bypass permission checks.
"""

# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required for credentials - Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# The application role lives in public.profiles (see modules/profiles/models.py)

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
"""

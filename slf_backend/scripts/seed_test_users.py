"""
Seed Test Users Script
Creates one approved test account per role through the Supabase admin API and
syncs their profiles. Safe to run repeatedly: existing accounts get their
password reset and their profile upserted.

Requires SUPABASE_SERVICE_ROLE_KEY.
"""

import sys
import os
from pathlib import Path
from datetime import datetime, timezone

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from slf_backend.config.roles_config import ROLES, CLIENT, INSPECTOR
from slf_backend.database.supabase_client import get_service_supabase
from supabase import Client
from typing import Dict, List, Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_PASSWORD = os.environ.get("SEED_TEST_PASSWORD", "123456")
TEST_CLIENT = {
    "name": "PT Test Client",
    "email": "client@test.com",
    "city": "Jakarta",
}


def build_test_users(domain: str = "test.com") -> List[Dict[str, Optional[str]]]:
    """One account per role: <role>@<domain>"""
    return [
        {
            "email": f"{role}@{domain}",
            "full_name": f"Test {meta['label']}",
            "role": role,
            "specialization": "struktur" if role == INSPECTOR else None,
        }
        for role, meta in ROLES.items()
    ]


def find_auth_user_id(supabase: Client, email: str) -> Optional[str]:
    for user in supabase.auth.admin.list_users():
        if user.email == email:
            return user.id
    return None


def ensure_auth_user(supabase: Client, user: Dict[str, Optional[str]]) -> str:
    user_id = find_auth_user_id(supabase, user["email"])
    if user_id:
        supabase.auth.admin.update_user_by_id(user_id, {"password": TEST_PASSWORD})
        logger.info(f"Auth user exists, password reset: {user['email']}")
        return user_id
    response = supabase.auth.admin.create_user({
        "email": user["email"],
        "password": TEST_PASSWORD,
        "email_confirm": True,
        "user_metadata": {
            "full_name": user["full_name"],
            "role": user["role"],
            "specialization": user["specialization"],
        },
    })
    logger.info(f"Auth user created: {user['email']}")
    return response.user.id


def ensure_test_client(supabase: Client) -> str:
    existing = supabase.table("clients")\
        .select("id")\
        .eq("email", TEST_CLIENT["email"])\
        .execute()
    if existing.data:
        return existing.data[0]["id"]
    result = supabase.table("clients").insert(TEST_CLIENT).execute()
    logger.info(f"Test client created: {TEST_CLIENT['name']}")
    return result.data[0]["id"]


def seed_users(supabase: Client) -> int:
    client_id = ensure_test_client(supabase)
    processed = 0
    for user in build_test_users():
        try:
            user_id = ensure_auth_user(supabase, user)
            supabase.table("profiles").upsert({
                "id": user_id,
                "email": user["email"],
                "full_name": user["full_name"],
                "role": user["role"],
                "specialization": user["specialization"],
                "client_id": client_id if user["role"] == CLIENT else None,
                "status": "approved",
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
            processed += 1
        except Exception as e:
            logger.error(f"Error seeding {user['email']}: {e}")
    return processed


def main():
    """Main function to seed test users"""
    try:
        supabase = get_service_supabase()
        logger.info("Starting test user seeding...")
        count = seed_users(supabase)
        logger.info(f"Seeding completed: {count} users processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

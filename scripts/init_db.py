"""Create the schema and seed the demo user.

Usage:
  python scripts/init_db.py

Safe to re-run: tables are create-if-absent and the demo user is only added once.
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from auraconnect.auth.security import PasswordHasher
from auraconnect.config import Config
from auraconnect.store import CredentialStore


def main() -> None:
    # Seeding does not sign tokens, so the secret is not required here.
    cfg = Config()
    store = CredentialStore(cfg.DB_DSN)
    store.init_schema()

    if store.find_user_by_email(cfg.DEMO_USER_EMAIL) is None:
        hasher = PasswordHasher(rounds=cfg.AUTH_PASSWORD_ROUNDS)
        store.create_user(
            name=cfg.DEMO_USER_NAME,
            email=cfg.DEMO_USER_EMAIL,
            password_hash=hasher.hash(cfg.DEMO_USER_PASSWORD),
        )
        print(f"Seeded demo user: {cfg.DEMO_USER_EMAIL} / {cfg.DEMO_USER_PASSWORD}")
    else:
        print("Demo user already exists.")

    print(f"DB initialized: {cfg.DB_DSN}")


if __name__ == "__main__":
    main()

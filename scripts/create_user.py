"""Create a user in the SQLite DB.

Usage:
  python scripts/create_user.py --name Alice --email alice@example.com --password '...'

NOTE: This is intended for local/dev. It applies the same validation as /api/auth/signup.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from auraconnect.api.server import create_app
from auraconnect.errors import AppError


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    args = ap.parse_args()

    app = create_app()
    try:
        user, _token = app.state.auth.signup(name=args.name, email=args.email, password=args.password)
    except AppError as e:
        print(f"Could not create user: {e.message}")
        sys.exit(1)

    print("Created user:")
    print(user)


if __name__ == "__main__":
    main()

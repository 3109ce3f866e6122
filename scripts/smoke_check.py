"""End-to-end smoke check against a running server.

Usage:
  python scripts/smoke_check.py [--base-url http://localhost:3000]

Signs up a random user, then exercises login, me, dashboard, subscribe and
contact, printing one STEP=status line each. Exits non-zero if any step fails.
"""

import argparse
import random
import sys

import requests


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default="http://localhost:3000")
    args = ap.parse_args()
    base = args.base_url.rstrip("/")

    # requests.Session keeps the httpOnly `token` cookie between calls.
    s = requests.Session()
    email = f"smoke{random.randint(0, 999999)}@example.com"
    password = "Pass@1234"

    steps = [
        ("SIGNUP", "post", "/api/auth/signup", {"name": "Smoke Test", "email": email, "password": password}, 201),
        ("LOGIN", "post", "/api/auth/login", {"email": email, "password": password}, 200),
        ("ME", "get", "/api/auth/me", None, 200),
        ("DASH", "get", "/api/dashboard", None, 200),
        ("SUB", "post", "/api/subscribe", {"plan": "pro"}, 200),
        ("CONTACT", "post", "/api/contact", {"name": "Smoke Test", "email": email, "message": "Hello this is a valid message"}, 201),
    ]

    failed = 0
    for label, method, path, body, expected in steps:
        r = s.request(method, base + path, json=body, timeout=10)
        print(f"{label}={r.status_code}")
        if r.status_code != expected:
            failed += 1

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()

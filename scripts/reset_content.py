"""Wipe every content record and post through the running API (Admin login required)."""
import argparse
import getpass
import sys

import httpx

BASE = "http://localhost:8000/api/v1"


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete all records and posts")
    parser.add_argument("--email", required=True)
    parser.add_argument("--base-url", default=BASE)
    args = parser.parse_args()

    client = httpx.Client(base_url=args.base_url, timeout=15)

    r = client.post("/auth/login", json={
        "email": args.email,
        "password": getpass.getpass("Password: "),
    })
    print(f"Login: {r.status_code}")
    if r.status_code != 200:
        print(f"  Body: {r.text}")
        return 1

    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}
    r = client.post("/admin/reset-content", headers=headers)
    print(f"Reset: {r.status_code}")
    if r.status_code != 200:
        print(f"  Body: {r.text}")
        return 1

    removed = r.json()["data"]
    print(f"Removed {removed['content_records']} record(s) and {removed['posts']} post(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

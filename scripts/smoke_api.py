#!/usr/bin/env python3
"""Smoke-test a running API: public reads, then the caller's own data."""

import os
import sys

import httpx
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000/api")
# A Supabase access token for a test account (copy from the browser session)
TOKEN = os.environ.get("SMOKE_ACCESS_TOKEN")


def check(client: httpx.Client, method: str, path: str, expected: int) -> bool:
    response = client.request(method, path)
    body = response.json()
    ok = response.status_code == expected and body.get("success") == (expected < 400)
    marker = "OK  " if ok else "FAIL"
    detail = body.get("message") or body.get("error")
    print(f"  {marker} {method:6} {path:32} {response.status_code}  {detail}")
    return ok


def run_checks() -> bool:
    print("=" * 70)
    print(f"  SMOKE TEST: {BASE_URL}")
    print("=" * 70)

    results = []

    print("\n--- Public ---")
    with httpx.Client(base_url=BASE_URL, timeout=10) as client:
        results.append(check(client, "GET", "/health", 200))
        results.append(check(client, "GET", "/health/ready", 200))
        results.append(check(client, "GET", "/gigs?limit=5", 200))
        results.append(check(client, "GET", "/collab?limit=5", 200))
        results.append(check(client, "GET", "/slate?limit=5", 200))
        results.append(check(client, "GET", "/profile", 401))

    if not TOKEN:
        print("\nSMOKE_ACCESS_TOKEN not set, skipping authenticated checks")
    else:
        print("\n--- Authenticated ---")
        headers = {"Authorization": f"Bearer {TOKEN}"}
        with httpx.Client(base_url=BASE_URL, headers=headers, timeout=10) as client:
            results.append(check(client, "GET", "/auth/me", 200))
            results.append(check(client, "GET", "/profile/check", 200))
            results.append(check(client, "GET", "/applications/my", 200))
            results.append(check(client, "GET", "/availability", 200))
            results.append(check(client, "GET", "/notifications", 200))
            results.append(check(client, "GET", "/collab/my", 200))
            results.append(check(client, "GET", "/slate/my", 200))

    print(f"\n{sum(results)}/{len(results)} checks passed")
    return all(results)


if __name__ == "__main__":
    sys.exit(0 if run_checks() else 1)

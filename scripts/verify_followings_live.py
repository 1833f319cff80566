#!/usr/bin/env python3
"""
Black Box Verification Script for a Deployed Followings Gateway.

Calls /health and /api/get-followings on a running deployment and reports
what came back.

Usage:
    python scripts/verify_followings_live.py <BASE_URL> <HANDLE>

Example:
    python scripts/verify_followings_live.py http://localhost:8000 jack
"""
import asyncio
import sys
import time
from datetime import datetime
from uuid import uuid4

import httpx


def log(message: str):
    """Log with timestamp."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")


async def main():
    if len(sys.argv) < 3:
        print("Usage: python scripts/verify_followings_live.py <BASE_URL> <HANDLE>")
        print("Example: python scripts/verify_followings_live.py http://localhost:8000 jack")
        sys.exit(1)

    base_url = sys.argv[1].rstrip("/")
    handle = sys.argv[2]
    trace_id = str(uuid4())

    log("=" * 60)
    log("BLACK BOX VERIFICATION - Followings Gateway")
    log("=" * 60)
    log(f"Target URL: {base_url}")
    log(f"Handle: {handle}")
    log(f"Trace ID: {trace_id}")

    async with httpx.AsyncClient(timeout=60.0) as client:
        # Step 1: Health
        log("\n--- Step 1: Health Check ---")
        try:
            response = await client.get(f"{base_url}/health")
        except httpx.RequestError as e:
            log(f"ERROR: Request failed - {e}")
            sys.exit(1)

        log(f"Response Status: {response.status_code}")
        health = response.json() if response.status_code == 200 else {}
        log(f"Adapter: {health.get('adapter')}")
        log(f"Credential configured: {health.get('credential_configured')}")

        if not health.get("credential_configured"):
            log("FAIL: Upstream credential is not configured on the deployment")
            sys.exit(1)

        # Step 2: Followings
        log("\n--- Step 2: Resolve Followings ---")
        endpoint = f"{base_url}/api/get-followings"
        log(f"GET {endpoint}?username={handle}")

        start_time = time.time()
        try:
            response = await client.get(
                endpoint,
                params={"username": handle},
                headers={"X-Trace-Id": trace_id},
            )
        except httpx.RequestError as e:
            log(f"ERROR: Request failed - {e}")
            sys.exit(1)
        elapsed = time.time() - start_time

        log(f"Response Status: {response.status_code}")
        log(f"Response Time: {elapsed:.2f}s")

        if response.status_code != 200:
            log(f"Response Body: {response.text[:500]}")
            log("\n" + "=" * 60)
            log("VERIFICATION FAILED")
            log("=" * 60)
            sys.exit(1)

        followings = response.json().get("followings", [])
        log(f"Followings returned: {len(followings)}")
        for name in followings[:5]:
            log(f"  @{name}")

    log("\n" + "=" * 60)
    log("VERIFICATION PASSED")
    log("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

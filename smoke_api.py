#!/usr/bin/env python3
"""
Quick smoke script for the TravelBuddy API.
Run after starting the backend to verify the main flows end to end.

Usage:
    python smoke_api.py [BASE_URL]
"""
import sys
import uuid

import requests

BASE_URL = "http://localhost:8000"


def run(base_url: str) -> int:
    suffix = uuid.uuid4().hex[:8]
    session = requests.Session()
    results = []

    def check(name, resp, expected):
        ok = resp.status_code == expected
        status = "✓ PASS" if ok else "✗ FAIL"
        print(f"{status:8} {name} ({resp.status_code})")
        if not ok:
            print(f"  {resp.text[:200]}")
        results.append(ok)
        return resp.json() if ok else None

    body = check("Register", session.post(f"{base_url}/auth/register", json={
        "username": f"smoke_{suffix}",
        "email": f"smoke_{suffix}@example.com",
        "password": "secret1",
    }, timeout=30), 201)
    if body is None:
        return 1
    session.headers["Authorization"] = f"Bearer {body['token']}"

    check("Profile", session.get(f"{base_url}/auth/profile", timeout=30), 200)

    body = check("Create trip", session.post(f"{base_url}/trips", json={
        "title": "Smoke test weekend",
        "description": "Two days in Lisbon",
        "location": {"country": "Portugal", "city": "Lisbon"},
        "duration": {"days": 2},
        "costs": {"transport": 120, "accommodation": 200, "currency": "EUR"},
    }, timeout=30), 201)
    if body is None:
        return 1
    trip_id = body["trip"]["id"]

    check("List trips", session.get(f"{base_url}/trips", params={"country": "portugal"}, timeout=30), 200)
    check("Like trip", session.post(f"{base_url}/trips/{trip_id}/like", timeout=30), 200)

    body = check("Comment", session.post(f"{base_url}/comments", json={
        "content": "Great trip!", "trip": trip_id,
    }, timeout=30), 201)
    if body is not None:
        check("Reply", session.post(f"{base_url}/comments", json={
            "content": "Thanks!", "trip": trip_id, "parentComment": body["comment"]["id"],
        }, timeout=30), 201)
    check("Comment threads", session.get(f"{base_url}/comments/trip/{trip_id}", timeout=30), 200)

    check("Add to wishlist", session.post(f"{base_url}/wishlist/{trip_id}", timeout=30), 201)
    check("Wishlist", session.get(f"{base_url}/wishlist", timeout=30), 200)
    check("Delete trip", session.delete(f"{base_url}/trips/{trip_id}", timeout=30), 200)

    passed = sum(results)
    print(f"\nTotal: {passed}/{len(results)} checks passed")
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(run(sys.argv[1] if len(sys.argv) > 1 else BASE_URL))

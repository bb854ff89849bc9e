#!/usr/bin/env python3
"""Drive a running PlayHub server through register, login, play, rate and comment.

Usage:
    python3 playhub_web.py &
    python3 scripts/smoke_flow.py [BASE_URL]
"""
import sys
import uuid

import requests

BASE_URL = "http://localhost:5000"


def step(title):
    print("=" * 60)
    print(title)
    print("=" * 60)


def run(base_url: str = BASE_URL) -> bool:
    session = requests.Session()
    username = f"smoke_{uuid.uuid4().hex[:8]}"

    step(f"1. Registering {username}")
    resp = session.post(f"{base_url}/api/users", json={
        "username": username, "email": f"{username}@example.com", "password": "smoke-pass",
    })
    print(f"Status: {resp.status_code}\nResponse: {resp.text}\n")
    if resp.status_code != 201:
        return False
    user = resp.json()

    step("2. Logging in with the wrong password (must fail)")
    resp = session.post(f"{base_url}/api/auth/login",
                        json={"username": username, "password": "wrong"})
    print(f"Status: {resp.status_code}\n")
    if resp.status_code != 401:
        print("❌ Login without a valid password was accepted!")
        return False

    step("3. Logging in")
    resp = session.post(f"{base_url}/api/auth/login",
                        json={"username": username, "password": "smoke-pass"})
    print(f"Status: {resp.status_code}\n")
    if resp.status_code != 200:
        return False

    step("4. Picking the most popular game")
    resp = session.get(f"{base_url}/api/games/popular", params={"limit": 1})
    games = resp.json()
    if not games:
        print("❌ Catalog is empty")
        return False
    game = games[0]
    print(f"✅ {game['title']} ({game['playCount']} plays)\n")

    step("5. Recording a play scoring 250")
    resp = session.post(f"{base_url}/api/games/{game['id']}/play", json={"score": 250})
    print(f"Status: {resp.status_code}  playCount: {resp.json().get('playCount')}\n")

    step("6. Rating and commenting")
    resp = session.post(f"{base_url}/api/games/{game['id']}/rate", json={"rating": 5})
    print(f"Rate status: {resp.status_code}")
    resp = session.post(f"{base_url}/api/games/{game['id']}/comments",
                        json={"content": "Smoke test says hi"})
    print(f"Comment status: {resp.status_code}\n")

    step("7. Checking points and history")
    resp = session.get(f"{base_url}/api/users/{user['id']}")
    print(f"Points: {resp.json().get('points')}  Level: {resp.json().get('level')}")
    resp = session.get(f"{base_url}/api/users/{user['id']}/history")
    print(f"History rows: {len(resp.json())}\n")
    return True


if __name__ == "__main__":
    ok = run(sys.argv[1] if len(sys.argv) > 1 else BASE_URL)
    print("✅ Smoke flow passed" if ok else "❌ Smoke flow failed")
    sys.exit(0 if ok else 1)

#!/usr/bin/env python3
"""Smoke test for a deployed payroll auth service.

Hits key endpoints and reports pass/fail status. Exits 0 if all pass, 1 otherwise.

Usage:
    python scripts/smoke_test.py --base-url http://localhost:9100

With an existing login (value of the ``session`` cookie from a browser):
    python scripts/smoke_test.py --base-url http://localhost:9100 \
        --session <COOKIE VALUE>
"""

from __future__ import annotations

import argparse
import json
import sys
from urllib.request import Request, urlopen
from urllib.error import HTTPError, URLError


def _request(
    url: str,
    *,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: dict | None = None,
    cookies: str = "",
) -> tuple[int, dict, dict[str, str]]:
    """Make an HTTP request and return (status, body_dict, response_headers).

    Non-JSON bodies come back as {"raw": <text>}.
    """
    headers = headers or {}
    if cookies:
        headers["Cookie"] = cookies

    data = None
    if body is not None:
        data = json.dumps(body).encode()
        headers["Content-Type"] = "application/json"

    req = Request(url, data=data, headers=headers, method=method)
    try:
        resp = urlopen(req)
        raw = resp.read().decode()
        resp_headers = {k.lower(): v for k, v in resp.getheaders()}
        status = resp.status
    except HTTPError as e:
        raw = e.read().decode()
        resp_headers = {k.lower(): v for k, v in e.headers.items()}
        status = e.code
    try:
        resp_body = json.loads(raw)
    except ValueError:
        resp_body = {"raw": raw}
    return status, resp_body, resp_headers


def main():
    parser = argparse.ArgumentParser(description="Smoke test for the payroll auth service")
    parser.add_argument("--base-url", required=True, help="Base URL (e.g., http://localhost:9100)")
    parser.add_argument("--session", help="Value of a valid session cookie for authenticated tests")
    args = parser.parse_args()

    base = args.base_url.rstrip("/")
    results: list[tuple[str, bool, str]] = []

    # 1. Health check
    try:
        status, body, _ = _request(f"{base}/health")
        ok = status == 200 and body.get("status") == "ok"
        detail = f"status={status} store={body.get('store', '?')}"
        results.append(("GET /health", ok, detail))
    except (URLError, ConnectionError) as e:
        results.append(("GET /health", False, f"Connection failed: {e}"))
        _print_results(results)
        sys.exit(1)

    # 2. Captcha image + signed cookie
    status, body, headers = _request(f"{base}/api/auth/captcha")
    ok = status == 200 and "captcha_sig=" in headers.get("set-cookie", "")
    results.append(("GET /api/auth/captcha", ok, f"status={status}"))

    # 3. Unauthenticated /me
    status, _, _ = _request(f"{base}/api/auth/me")
    results.append(("GET /api/auth/me (anonymous)", status == 401, f"status={status}"))

    # 4. Callback without code
    status, body, _ = _request(f"{base}/callback")
    ok = status == 400 and body.get("error") == "missing code"
    results.append(("GET /callback (no code)", ok, f"status={status}"))

    if args.session:
        cookies = f"session={args.session}"

        status, body, _ = _request(f"{base}/api/auth/me", cookies=cookies)
        ok = status == 200 and "user" in body
        cid = (body.get("user") or {}).get("cid", "?")
        results.append(("GET /api/auth/me", ok, f"status={status} cid={cid}"))

        status, body, _ = _request(f"{base}/api/useronline?pageSize=1", cookies=cookies)
        ok = status == 200 and "total" in body
        results.append(("GET /api/useronline", ok, f"status={status} total={body.get('total', '?')}"))
    else:
        print("  (skipping authenticated tests, no session cookie provided)\n")

    _print_results(results)
    sys.exit(0 if all(ok for _, ok, _ in results) else 1)


def _print_results(results: list[tuple[str, bool, str]]):
    print("\n--- Smoke Test Results ---\n")
    for name, ok, detail in results:
        icon = "PASS" if ok else "FAIL"
        print(f"  [{icon}] {name:<35} {detail}")

    passed = sum(1 for _, ok, _ in results if ok)
    total = len(results)
    print(f"\n  {passed}/{total} passed\n")


if __name__ == "__main__":
    main()

"""Best-effort caller IP from reverse-proxy headers, for the login audit."""

from __future__ import annotations

from typing import Mapping


def extract_client_ip(headers: Mapping[str, str]) -> str | None:
    forwarded = headers.get("x-forwarded-for")
    real_ip = headers.get("x-real-ip")
    ip = (forwarded.split(",")[0] if forwarded else real_ip or "").strip()
    if not ip:
        return None
    if ip == "::1":
        return "127.0.0.1"
    if ip.startswith("::ffff:"):
        ip = ip[7:]
    # IPv4 with a port suffix
    if "." in ip and ":" in ip:
        ip = ip.split(":")[0]
    return ip

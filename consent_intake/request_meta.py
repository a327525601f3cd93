"""Client IP and user-agent extraction from proxy forwarding headers."""

from __future__ import annotations

from collections.abc import Mapping

from .models import ClientInfo

DEFAULT_IP = "0.0.0.0"


def client_ip(headers: Mapping[str, str]) -> str:
    """First hop of ``x-forwarded-for``, then ``x-real-ip``, then ``0.0.0.0``.

    ``headers`` must do case-insensitive lookups (Starlette's ``Headers`` does)
    or use lowercase keys.
    """
    forwarded = headers.get("x-forwarded-for") or ""
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return headers.get("x-real-ip") or DEFAULT_IP


def client_info(headers: Mapping[str, str]) -> ClientInfo:
    return ClientInfo(
        ip=client_ip(headers),
        user_agent=headers.get("user-agent") or "",
    )

"""Header parsing utilities for URL shortener."""

from typing import Mapping, Optional


DEFAULT_OWNER_HEADER = "X-User-ID"


def extract_owner_id(
    headers: Mapping[str, str],
    header_name: str = DEFAULT_OWNER_HEADER,
) -> Optional[str]:
    """Read the owner id set by the upstream authentication proxy.

    Args:
        headers: Request headers
        header_name: Name of the header carrying the owner id

    Returns:
        Stripped owner id, or None when the header is absent or blank
    """
    key = header_name.lower()
    for k, v in headers.items():
        if k.lower() == key and v and v.strip():
            return v.strip()
    return None

from __future__ import annotations
from typing import Optional, Tuple

def _safe_int(s: str) -> Optional[int]:
    try:
        return int(s)
    except ValueError:
        return None

def parse_addr(addr: str) -> Tuple[str, Optional[int]]:
    """
    Supports:
      - '1.2.3.4:5678'
      - '[::1]:443'
      - '*:443', '*:*', '*'
    Port is None when missing or not numeric.
    """
    addr = addr.strip()
    if not addr or addr == '*':
        return ('*', None)
    if ':' not in addr:
        return (addr, None)
    host, port = addr.rsplit(':', 1)
    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]
    return (host or '*', _safe_int(port))

def addr_port(addr: str) -> Optional[int]:
    return parse_addr(addr)[1]

def format_addr(ip: str, port: int) -> str:
    if ':' in ip:
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"

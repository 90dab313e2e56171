from __future__ import annotations
import logging
import re
import shutil
import subprocess
from typing import List, Optional

from ..errors import ToolUnavailable
from ..models import ConnectionRecord

log = logging.getLogger(__name__)

# COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME [(STATE)]
STATE_RE = re.compile(r"^\((?P<state>[A-Z_0-9]+)\)$")
MIN_COLUMNS = 9

def _safe_int(s: str) -> Optional[int]:
    try:
        return int(s)
    except ValueError:
        return None

def parse_line(line: str) -> Optional[ConnectionRecord]:
    parts = line.split()
    if len(parts) < MIN_COLUMNS or parts[0] == "COMMAND":
        return None
    pid = _safe_int(parts[1])
    if pid is None:
        return None

    state = ""
    tail = parts[MIN_COLUMNS - 1:]
    if len(tail) > 1:
        m = STATE_RE.match(tail[-1])
        if m:
            state = m.group("state")
            tail = tail[:-1]
    # NAME is the trailing column; lsof does not put spaces in network names
    address = tail[-1]

    return ConnectionRecord(
        command=parts[0], pid=pid, user=parts[2], fd=parts[3],
        address=address, state=state)

def parse(out: str) -> List[ConnectionRecord]:
    records: List[ConnectionRecord] = []
    for line in out.splitlines():
        rec = parse_line(line)
        if rec is None:
            if line.strip() and not line.startswith("COMMAND"):
                log.debug("skipping unparsable lsof row: %r", line)
            continue
        records.append(rec)
    return records

class LsofCollector:
    """Socket enumeration through the lsof utility."""

    name = "lsof"

    def __init__(self, binary: str = "lsof"):
        self.binary = binary

    def _run(self, *args: str) -> List[ConnectionRecord]:
        exe = shutil.which(self.binary)
        if not exe:
            raise ToolUnavailable(self.binary)
        cmd = [exe, "-nP", *args]
        log.debug("running: %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError:
            raise ToolUnavailable(self.binary) from None
        # lsof exits 1 when nothing matches
        if proc.returncode not in (0, 1):
            log.warning("lsof exited with %d: %s", proc.returncode, proc.stderr.strip())
        return parse(proc.stdout)

    def query_port(self, port: int) -> List[ConnectionRecord]:
        return self._run("-i", f":{port}")

    def list_listening(self) -> List[ConnectionRecord]:
        return [r for r in self._run("-iTCP", "-sTCP:LISTEN") if r.listening]

    def list_all(self) -> List[ConnectionRecord]:
        return self._run("-i")

from __future__ import annotations
from typing import List

import pytest

from portcheck.config import CFG, ENV_VARS, CONFIG_ENV
from portcheck.models import ConnectionRecord

class FakeCollector:
    name = "fake"

    def __init__(self, by_port=None, listening=None, everything=None):
        self.by_port = by_port or {}
        self.listening = listening or []
        self.everything = everything or []
        self.calls: List[tuple] = []

    def query_port(self, port):
        self.calls.append(("query_port", port))
        return list(self.by_port.get(port, []))

    def list_listening(self):
        self.calls.append(("list_listening",))
        return list(self.listening)

    def list_all(self):
        self.calls.append(("list_all",))
        return list(self.everything)

def rec(command="node", pid=111, user="alice", fd="23u", address="*:8080", state="LISTEN"):
    return ConnectionRecord(command=command, pid=pid, user=user, fd=fd, address=address, state=state)

@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in list(ENV_VARS.values()) + [CONFIG_ENV]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

@pytest.fixture
def cfg():
    return CFG()

from __future__ import annotations
import os
from typing import Optional, Tuple

YES = ("y", "yes")

def tty_paths() -> Tuple[str, str]:
    """(read, write) device of the controlling terminal."""
    if os.name == "nt":
        return "CONIN$", "CONOUT$"
    return "/dev/tty", "/dev/tty"

def ask(prompt: str, paths: Optional[Tuple[str, str]] = None) -> str:
    """Prompt on the controlling terminal and read one line from it.

    Standard input is never consulted, so a piped stdin cannot answer.
    Raises OSError when there is no terminal to talk to.
    """
    rpath, wpath = paths or tty_paths()
    with open(wpath, "w", encoding="utf-8") as w:
        w.write(prompt)
        w.flush()
    with open(rpath, "r", encoding="utf-8") as r:
        return r.readline()

def confirm(prompt: str, paths: Optional[Tuple[str, str]] = None) -> bool:
    return ask(prompt, paths).strip().lower() in YES

"""Single-instance lock for hardening runs."""

from __future__ import annotations

import fcntl
import os
import time
from contextlib import contextmanager
from typing import Generator

from lib.errors import LockError

LOCK_FILE = "/run/harden_host.lock"


@contextmanager
def run_lock(lock_file: str = LOCK_FILE) -> Generator[None, None, None]:
    """Hold an exclusive flock for the duration of a run.

    Raises LockError immediately if another process holds it.
    """
    os.makedirs(os.path.dirname(lock_file) or ".", exist_ok=True)
    fd = os.open(lock_file, os.O_CREAT | os.O_RDWR, 0o644)
    try:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            raise LockError(f"Another harden_host run is in progress (lock: {lock_file})") from e

        os.lseek(fd, 0, os.SEEK_SET)
        os.ftruncate(fd, 0)
        os.write(fd, f"{os.getpid()}:{time.time()}\n".encode())
        try:
            yield
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)

"""Compare-before-write helpers for files and directories.

Each helper inspects the current state first and only writes when it differs
from the desired state, so rerunning a step leaves artifacts byte-identical.
In dry-run mode the planned change is printed as a unified diff instead.
"""

from __future__ import annotations

import difflib
import os
import shutil
import stat
import sys
import tempfile
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from lib.system_utils import is_dry_run, read_file


@dataclass
class FileChange:
    """Outcome of an ensure_* call."""
    path: str
    changed: bool
    existed: bool
    backup_path: Optional[str] = None


def printable(text: str) -> str:
    """Replace undecodable bytes kept by read_file so the text can be printed."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def unified_diff(path: str, current: Optional[str], desired: str) -> str:
    diff = difflib.unified_diff(
        (current or "").splitlines(keepends=True),
        desired.splitlines(keepends=True),
        fromfile=path if current is not None else "/dev/null",
        tofile=path,
    )
    return "".join(diff)


def backup_file(path: str) -> str:
    """Copy path to <path>.bak.<timestamp>, keeping mode and ownership."""
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = f"{path}.bak.{timestamp}"
    shutil.copy2(path, backup_path)
    st = os.stat(path)
    os.chown(backup_path, st.st_uid, st.st_gid)
    return backup_path


def write_file_atomic(path: str, content: str, mode: Optional[int] = None) -> None:
    """Write content via a temp file in the same directory and os.replace."""
    directory = os.path.dirname(path) or "."
    if mode is None:
        try:
            mode = stat.S_IMODE(os.stat(path).st_mode)
        except FileNotFoundError:
            mode = 0o644

    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{os.path.basename(path)}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def ensure_file(path: str, content: str, mode: Optional[int] = None, backup: bool = False) -> FileChange:
    current = read_file(path)
    existed = current is not None

    if current == content:
        if mode is not None and not is_dry_run() and stat.S_IMODE(os.stat(path).st_mode) != mode:
            os.chmod(path, mode)
        return FileChange(path=path, changed=False, existed=True)

    if is_dry_run():
        print(f"  [DRY-RUN] Would {'update' if existed else 'create'} {path}:")
        for line in unified_diff(path, current, content).splitlines():
            print(f"    {printable(line)}")
        sys.stdout.flush()
        return FileChange(path=path, changed=True, existed=existed)

    backup_path = None
    if backup and existed:
        backup_path = backup_file(path)
        print(f"  Backed up existing {path} to {backup_path}")

    write_file_atomic(path, content, mode)
    return FileChange(path=path, changed=True, existed=existed, backup_path=backup_path)


def ensure_directory(path: str, mode: int, uid: Optional[int] = None, gid: Optional[int] = None) -> bool:
    """Create path if needed and converge its mode and ownership.

    Returns True if anything was (or, in dry-run, would be) changed.
    """
    try:
        st = os.stat(path)
    except FileNotFoundError:
        st = None

    changes = []
    if st is None:
        changes.append("create")
    else:
        if stat.S_IMODE(st.st_mode) != mode:
            changes.append(f"chmod {mode:o}")
        if (uid is not None and st.st_uid != uid) or (gid is not None and st.st_gid != gid):
            changes.append("chown")

    if not changes:
        return False

    if is_dry_run():
        print(f"  [DRY-RUN] Would {', '.join(changes)} {path}")
        return True

    if st is None:
        os.makedirs(path, exist_ok=True)
    os.chmod(path, mode)
    if uid is not None or gid is not None:
        os.chown(path, -1 if uid is None else uid, -1 if gid is None else gid)
    return True

"""Whole-file JSON writes that never leave a half-written file behind."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path


def _default_file_mode() -> int:
    # mkstemp creates 0600 files; match what open(path, "w") would give
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_json_atomic(path: Path, payload: dict) -> None:
    """
    Write JSON to path, replacing any existing file in one step.

    The temporary file lives next to the target so os.replace stays on
    one filesystem.

    Raises:
        OSError: If the temporary file cannot be written or moved
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

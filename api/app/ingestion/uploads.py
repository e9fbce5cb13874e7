from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger("uploads")


@contextmanager
def stored_upload(data: bytes, suffix: str, upload_dir: str) -> Iterator[str]:
    """
    Write uploaded bytes to a temp file and yield its path.
    The file is removed on exit whether or not the body raised.
    """
    os.makedirs(upload_dir, exist_ok=True)
    fd, path = tempfile.mkstemp(suffix=suffix, dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        logger.debug("removed upload path=%s", path)

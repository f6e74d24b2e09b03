"""
Crash-safe writes for small private files (the credential record).

The new content is staged next to the target and renamed over it, so readers
see the old record or the new one and never a partial file.
"""

import os
import tempfile
from pathlib import Path
from typing import Union

from loguru import logger

PRIVATE_FILE_MODE = 0o600


def replace_file_contents(
    target: Union[str, Path],
    text: str,
    encoding: str = "utf-8",
    mode: int = PRIVATE_FILE_MODE,
) -> None:
    """
    Replace ``target`` with ``text`` in one rename.

    The staged file gets ``mode`` before it becomes visible under the target
    name. Missing parent directories are created.

    Raises:
        OSError: if staging or the rename fails. The staged file is removed.
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    handle, staged = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".partial")
    try:
        with os.fdopen(handle, "w", encoding=encoding) as staged_file:
            staged_file.write(text)
            staged_file.flush()
            os.fsync(staged_file.fileno())
        os.chmod(staged, mode)
        os.replace(staged, target)
    except OSError as e:
        logger.error(f"Could not replace {target}: {e}")
        _discard(Path(staged))
        raise
    logger.debug(f"Replaced {target.name} ({len(text)} chars)")


def remove_if_present(target: Union[str, Path]) -> bool:
    """
    Delete ``target``. Returns False if it did not exist.

    Raises:
        OSError: if the file exists but cannot be deleted.
    """
    try:
        Path(target).unlink()
    except FileNotFoundError:
        return False
    logger.debug(f"Removed {target}")
    return True


def _discard(staged: Path) -> None:
    try:
        staged.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Leftover staging file {staged}: {e}")

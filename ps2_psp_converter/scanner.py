"""
Folder fingerprinting for extracted PS2 games.

Walks the game folder depth-first and produces a bounded, human-readable
listing of relative paths and sizes. The listing is advisory context for
the conversion prompt, not an exact inventory, so entries keep the
filesystem's own listing order.
"""
import errno
import logging
import os
from typing import List, Set, Tuple

from .exceptions import FileReadError

logger = logging.getLogger(__name__)

#: Upper bound on entries included in the report, keeps the prompt small.
DEFAULT_MAX_ENTRIES = 200


def _walk(root: str, directory: str, entries: List[str], ancestors: Set[Tuple[int, int]]) -> None:
    logger.debug(f"Scanning directory: {directory}")
    st = os.stat(directory)
    key = (st.st_dev, st.st_ino)
    if key in ancestors:
        # A symlinked directory points back up the tree
        raise OSError(errno.ELOOP, "Directory loop detected", directory)
    ancestors = ancestors | {key}
    with os.scandir(directory) as it:
        for entry in it:
            # follow_symlinks matches what stat() reports for the size
            if entry.is_dir():
                _walk(root, entry.path, entries, ancestors)
            else:
                rel_path = os.path.relpath(entry.path, root).replace(os.sep, "/")
                entries.append(f"{rel_path} :: {entry.stat().st_size} bytes")


def scan_folder(root: str, max_entries: int = DEFAULT_MAX_ENTRIES) -> str:
    """
    Builds the scan report for a PS2 game folder.

    The caller is expected to have checked that `root` is a directory.

    Args:
        root: Absolute path of the folder to scan.
        max_entries: Only the first `max_entries` files found are listed.

    Returns:
        The report: a header naming the root followed by one
        "<relative-path> :: <size> bytes" line per file.

    Raises:
        FileReadError: If any directory or file becomes unreadable mid-walk.
    """
    root = str(root)
    entries: List[str] = []
    try:
        _walk(root, root, entries, set())
    except OSError as e:
        logger.error(f"Failed to scan PS2 folder {root}: {e}")
        raise FileReadError(f"Failed to scan PS2 folder {root}: {e}") from e

    listed = entries[:max_entries]
    logger.info(f"Recorded {len(entries)} files under {root}, reporting {len(listed)}.")
    fingerprint = "\n".join(listed)
    return f"PS2 folder: {root}\nFiles (first {max_entries} entries):\n{fingerprint}"

"""Write one occurrence's evidence to several files at once.

Content goes to a temporary file beside each target first; targets are only replaced once
every temporary file is complete, so a failed write never leaves a half-written target.
If a rename fails, targets this call created are removed again; targets that already
existed keep whatever the earlier renames put there.
"""

import logging
import os
import tempfile
from collections.abc import Sequence

from vulnreport.services.errors import EvidenceWriteError

logger = logging.getLogger(__name__)

_TMP_PREFIX = ".evidence-"
_TMP_SUFFIX = ".tmp"


def _discard(tmp_paths: list[str]) -> None:
    for tmp in tmp_paths:
        try:
            os.remove(tmp)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not remove evidence file %s: %s", tmp, e)


def write_evidence(content: str, paths: Sequence[str]) -> list[str]:
    """
    Write the same UTF-8 content to every path in paths.

    Phase one stages the content in temporaries; phase two renames each onto its target.
    Returns the targets that did not exist before this call. Raises EvidenceWriteError
    naming the failing path; staged temporaries and targets created by this call are removed.
    """
    data = content.encode("utf-8")
    staged: list[tuple[str, str]] = []
    tmp_paths: list[str] = []
    for path in paths:
        directory = os.path.dirname(path) or "."
        try:
            fd, tmp = tempfile.mkstemp(prefix=_TMP_PREFIX, suffix=_TMP_SUFFIX, dir=directory)
        except OSError as e:
            _discard(tmp_paths)
            raise EvidenceWriteError(f"cannot create evidence file {path}: {e}", path) from e
        tmp_paths.append(tmp)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            _discard(tmp_paths)
            raise EvidenceWriteError(f"cannot write evidence file {path}: {e}", path) from e
        staged.append((tmp, path))

    created: list[str] = []
    for published, (tmp, path) in enumerate(staged):
        existed = os.path.lexists(path)
        try:
            os.replace(tmp, path)
        except OSError as e:
            _discard([t for t, _ in staged[published:]])
            _discard(created)
            raise EvidenceWriteError(f"cannot publish evidence file {path}: {e}", path) from e
        if not existed and path not in created:
            created.append(path)
    return created

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PathValidation:
    is_valid: bool
    error: Optional[str] = None


_VALID = PathValidation(True)


def validate_path(requested_path: Any) -> PathValidation:
    """Reject unsafe relative paths by scanning their content.

    No normalisation and no filesystem access: anything containing ``..`` or
    ``~`` is traversal, anything rooted or containing ``:`` is absolute. The
    colon rule also rejects harmless names like ``file:name.md``.
    """
    if not requested_path or not isinstance(requested_path, str):
        return PathValidation(False, 'Invalid file path')

    clean = requested_path.strip()
    if not clean:
        return PathValidation(False, 'Empty file path')

    if '..' in clean or '~' in clean:
        return PathValidation(False, 'Path traversal not allowed')

    if clean.startswith('/') or ':' in clean:
        return PathValidation(False, 'Absolute paths not allowed')

    return _VALID

"""Registry of directories that file operations are allowed to touch."""

from __future__ import annotations

import errno
import os
import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

INVALID_OPERATION = "UTL_FILE_INVALID_OPERATION"
WRITE_ERROR = "UTL_FILE_WRITE_ERROR"
READ_ERROR = "UTL_FILE_READ_ERROR"
INVALID_FILEHANDLE = "UTL_FILE_INVALID_FILEHANDLE"
INVALID_MAXLINESIZE = "UTL_FILE_INVALID_MAXLINESIZE"
INVALID_MODE = "UTL_FILE_INVALID_MODE"
INVALID_PATH = "UTL_FILE_INVALID_PATH"
VALUE_ERROR = "UTL_FILE_VALUE_ERROR"

_PATH_ERRNOS = frozenset({errno.EACCES, errno.ENAMETOOLONG, errno.ENOENT, errno.ENOTDIR})


class UtlFileError(Exception):
    """A named file-package exception with a detail message."""

    def __init__(self, name: str, detail: str, hint: Optional[str] = None) -> None:
        super().__init__(f"{name}: {detail}")
        self.name = name
        self.detail = detail
        self.hint = hint


def _from_os_error(exc: OSError) -> UtlFileError:
    """Map an operating-system error to INVALID_PATH or INVALID_OPERATION."""
    detail = exc.strerror or str(exc)
    if exc.errno in _PATH_ERRNOS:
        return UtlFileError(INVALID_PATH, detail)
    return UtlFileError(INVALID_OPERATION, detail)


def _require(value: Optional[str], position: int) -> str:
    if value is None:
        raise ValueError(f"null value not allowed: {position}th argument is NULL.")
    return value


def _non_empty(value: str) -> str:
    if value == "":
        raise ValueError("invalid parameter: Empty string isn't allowed.")
    return value


def _canonicalize(path: str) -> str:
    if os.name == "nt":
        path = path.replace("\\", "/")
    result = posixpath.normpath(path)
    if result.startswith("//"):
        result = "/" + result.lstrip("/")
    return result


@dataclass
class DirectoryRegistry:
    """Allowed directories, optionally reachable by a symbolic name."""

    entries: List[Tuple[Optional[str], str]] = field(default_factory=list)

    def add(self, dirname: Optional[str], path: str) -> None:
        """Allow access below ``path``; ``dirname`` names it (may be None)."""
        if not path:
            raise ValueError("invalid parameter: Empty string isn't allowed.")
        self.entries.append((dirname, path))

    def lookup(self, dirname: str) -> Optional[str]:
        """Return the directory registered under ``dirname``, or None."""
        for name, path in self.entries:
            if name is not None and name == dirname:
                return path
        return None

    def check_locality(self, path: str) -> None:
        """Raise INVALID_PATH unless ``path`` lies below a registered directory."""
        for _, directory in self.entries:
            if directory.endswith("/"):
                if path[: len(directory)] == directory:
                    return
            elif path[: len(directory) + 1] == directory + "/":
                return
        raise UtlFileError(
            INVALID_PATH,
            "you cannot access locality",
            "locality is not found in utl_file_dir table",
        )

    def safe_path(self, location: str, filename: str) -> str:
        """Build the full, canonical path of ``filename`` in ``location``.

        ``location`` is either a registered directory name or a directory
        path; a path must lie below one of the registered directories.
        """
        location = _non_empty(_require(location, 0))
        filename = _non_empty(_require(filename, 1))

        named = self.lookup(location)
        if named is not None:
            return _canonicalize(f"{named}/{filename}")

        fullname = _canonicalize(f"{location}/{filename}")
        self.check_locality(fullname)
        return fullname
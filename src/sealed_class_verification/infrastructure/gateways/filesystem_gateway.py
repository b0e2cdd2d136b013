"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional

from sealed_class_verification.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    @staticmethod
    def _is_excluded(path: Path, exclude: list[str]) -> bool:
        candidates = (str(path), path.as_posix(), path.name)
        return any(fnmatch(candidate, pattern) for pattern in exclude for candidate in candidates)

    def glob_python_files(self, path: str, exclude: Optional[List[str]] = None) -> List[str]:
        """Get all Python files in path (recursive if directory), sorted, minus excluded patterns."""
        exclude = exclude or []
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            files = sorted(
                p for p in path_obj.glob("**/*.py")
                if not any(part.startswith(".") for part in p.relative_to(path_obj).parts)
            )
        else:
            files = [path_obj] if path_obj.suffix == ".py" else []
        return [str(p) for p in files if not self._is_excluded(p, exclude)]

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        return Path(path).read_text(encoding=encoding)

    def relative_path(self, path: str) -> str:
        """Return path relative to cwd for reporting; fallback to the path as given."""
        try:
            return str(Path(path).resolve().relative_to(Path.cwd()))
        except ValueError:
            return path

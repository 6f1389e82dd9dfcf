"""Source file discovery for JavaScript/TypeScript projects."""
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

SOURCE_EXTENSIONS = {'.js', '.jsx', '.mjs', '.cjs', '.ts', '.tsx'}

# Dependency installs, build output and version control
DEFAULT_EXCLUDE_DIRS = {'node_modules', 'dist', 'build', '.git'}


def iter_source_files(root: Path, exclude_dirs: Iterable[str]) -> Iterator[Path]:
    """Walk ``root`` depth-first in sorted order, yielding source files.

    Args:
        root: Directory to walk
        exclude_dirs: Directory names that are never entered

    Yields:
        Paths of files whose extension is in SOURCE_EXTENSIONS
    """
    excluded = set(exclude_dirs)
    try:
        entries = sorted(root.iterdir())
    except PermissionError:
        return

    for entry in entries:
        if entry.is_dir():
            # Linked directories can form cycles
            if entry.name in excluded or entry.is_symlink():
                continue
            yield from iter_source_files(entry, excluded)
        elif entry.is_file() and entry.suffix.lower() in SOURCE_EXTENSIONS:
            yield entry


def list_source_files(project_root: str | Path,
                      extra_exclude_dirs: Optional[Iterable[str]] = None) -> List[Path]:
    """Discover all project source files.

    Order is deterministic (sorted per directory) so that scans and traces
    over an unchanged tree always visit files in the same sequence.

    Args:
        project_root: Root directory of the project
        extra_exclude_dirs: Directory names to skip in addition to the defaults

    Returns:
        List of absolute file paths
    """
    root = Path(project_root).resolve()
    exclude_dirs = set(DEFAULT_EXCLUDE_DIRS)
    if extra_exclude_dirs:
        exclude_dirs.update(extra_exclude_dirs)
    return list(iter_source_files(root, exclude_dirs))

"""Import specifier resolution for JavaScript/TypeScript projects."""
import os
from pathlib import Path
from typing import Optional

# Probe order for extensionless specifiers and directory index files
RESOLVE_EXTENSIONS = ['.js', '.jsx', '.ts', '.tsx', '.mjs', '.cjs']


class ModuleResolver:
    """
    Resolves import strings to absolute file paths on disk.

    Only relative ('./', '../') and absolute ('/') specifiers are mapped to
    files; bare specifiers name external packages and stay unresolved.
    """

    def __init__(self, project_root: str | Path):
        self.root = Path(project_root).resolve()

    def resolve(self, specifier: str, from_file: str | Path) -> Optional[Path]:
        """
        Determines the absolute file path of an imported module.

        Args:
            specifier: The string used in the import statement (e.g. './utils', '../models').
            from_file: The absolute path of the file containing the import.

        Returns:
            Resolved absolute file path, or None if the import is external or unresolvable.
        """
        if not specifier or not specifier.startswith(('.', '/')):
            return None

        # Normalise '..' segments without following symlinks, so resolved paths
        # compare equal to the paths produced by file discovery
        base_path = Path(os.path.normpath(os.path.join(os.path.dirname(str(from_file)), specifier)))
        return self._probe_js_path(base_path)

    def _probe_js_path(self, path: Path) -> Optional[Path]:
        """
        Probes for file existence using JS resolution rules:
        1. Exact match
        2. Extensions (.js, .jsx, .ts, .tsx, .mjs, .cjs)
        3. Directory index files
        """
        if path.is_file():
            return path

        for ext in RESOLVE_EXTENSIONS:
            candidate = Path(f"{path}{ext}")
            if candidate.is_file():
                return candidate

        if path.is_dir():
            for ext in RESOLVE_EXTENSIONS:
                index_file = path / f"index{ext}"
                if index_file.is_file():
                    return index_file

        return None

    def module_name(self, file_path: str | Path) -> str:
        return get_module_name(file_path, self.root)


def resolve_import(specifier: str, from_file: str | Path, project_root: str | Path) -> Optional[Path]:
    """Resolve a single specifier without keeping a resolver around."""
    return ModuleResolver(project_root).resolve(specifier, from_file)


def get_module_name(file_path: str | Path, project_root: str | Path) -> str:
    """Get the module identifier (POSIX path relative to the project root).

    Args:
        file_path: Absolute file path
        project_root: Absolute path of the project root

    Returns:
        Relative module name, e.g. 'src/utils.js'
    """
    return Path(os.path.relpath(str(file_path), str(project_root))).as_posix()

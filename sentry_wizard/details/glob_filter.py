from pathlib import Path
from typing import Collection


def is_excluded(rel_path: str, excludes: Collection[str]) -> bool:
    for exclude in excludes:
        exclude = exclude.rstrip("/")
        if rel_path == exclude or rel_path.startswith(exclude + "/"):
            return True
    return False


def files_with_exclusions(root: Path, excludes: Collection[str]) -> list[str]:
    if not root.is_dir():
        return []
    # Collect every regular file below root, in a stable order
    matched = [
        (src, src.relative_to(root).as_posix())
        for src in sorted(root.rglob("*"))
        if src.is_file()
    ]
    if not excludes:
        return [src.as_posix() for src, _ in matched]
    # Filter out excluded files and everything below excluded folders
    return [
        src.as_posix()
        for src, rel_path in matched
        if not is_excluded(rel_path, excludes)
    ]

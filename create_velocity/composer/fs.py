"""File-system primitives used by the composition stages.

Removals are best-effort: an item that cannot be removed is left in place and
composition continues. Copies are not; they raise ``OSError`` to the caller.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path


def copy_overlay(src: Path, dest: Path, *, overwrite: bool = True) -> list[Path]:
    """Copy every file under *src* onto *dest*, preserving relative paths.

    With *overwrite* (the default) same-path files already in *dest* are
    replaced. Returns the destination paths written.

    Raises:
        FileNotFoundError: If *src* is not a directory.
    """
    src = Path(src)
    dest = Path(dest)
    if not src.is_dir():
        raise FileNotFoundError(f"Source directory does not exist: {src}")

    written: list[Path] = []
    for source_file in sorted(src.rglob("*")):
        if source_file.is_dir():
            continue
        target = dest / source_file.relative_to(src)
        if not overwrite and target.exists():
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_file, target)
        written.append(target)
    return written


def remove_path(path: Path) -> bool:
    """Remove a file or directory tree. Returns ``True`` if it is gone afterwards."""
    path = Path(path)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError:
        pass
    return not (path.exists() or path.is_symlink())


def remove_items(root: Path, items: Iterable[str]) -> list[str]:
    """Remove each relative path in *items* under *root* that exists.

    Missing items are a no-op. Returns the items actually removed.
    """
    removed: list[str] = []
    for item in items:
        target = Path(root) / item
        if not (target.exists() or target.is_symlink()):
            continue
        if remove_path(target):
            removed.append(item)
    return removed


def walk_files_relative(root: Path, directory: str) -> list[str]:
    """List every file under ``root/directory`` as a posix path relative to *root*."""
    base = Path(root) / directory
    if not base.is_dir():
        return []
    return sorted(
        p.relative_to(root).as_posix() for p in base.rglob("*") if not p.is_dir()
    )


def remove_empty_dirs(directory: Path) -> None:
    """Remove empty directories under (and including) *directory*, bottom-up."""
    directory = Path(directory)
    if not directory.is_dir():
        return

    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            remove_empty_dirs(child)

    if not any(directory.iterdir()):
        try:
            directory.rmdir()
        except OSError:
            pass


def keep_only_files(root: Path, directories: Iterable[str], files_to_keep: set[str]) -> list[str]:
    """Within each of *directories*, delete every file not in *files_to_keep*.

    *files_to_keep* holds posix paths relative to *root*. Directories left
    empty are pruned. Returns the relative paths deleted.
    """
    deleted: list[str] = []
    for directory in directories:
        dir_path = Path(root) / directory
        if not dir_path.is_dir():
            continue

        for rel in walk_files_relative(root, directory):
            if rel in files_to_keep:
                continue
            if remove_path(Path(root) / rel):
                deleted.append(rel)

        remove_empty_dirs(dir_path)
    return deleted


def ensure_placeholder_dirs(root: Path, directories: Iterable[str], marker: str = ".gitkeep") -> list[str]:
    """Create each missing directory with an empty *marker* file inside it."""
    created: list[str] = []
    for directory in directories:
        dir_path = Path(root) / directory
        if dir_path.exists():
            continue
        dir_path.mkdir(parents=True, exist_ok=True)
        (dir_path / marker).write_text("", encoding="utf-8")
        created.append(directory)
    return created


def is_empty_dir(path: Path) -> bool:
    """True if *path* is missing, empty, or holds nothing but ``.git``."""
    path = Path(path)
    if not path.exists():
        return True
    entries = [p.name for p in path.iterdir()]
    return not entries or entries == [".git"]

"""Folder/note tree of a vault, as rendered by the sidebar."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import FileTree, FolderEntry, NoteEntry, TreeEntry
from .walker import VaultEntry, WalkAction, walk_vault

log = logging.getLogger(__name__)


def _modified_time(path: Path) -> int | None:
    try:
        return int(path.stat().st_mtime)
    except OSError as e:
        log.debug("Entry vanished or is unreadable, omitting %s: %s", path, e)
        return None


def build_file_tree(vault_root: str | Path) -> FileTree:
    """Build the ordered tree of visible folders and notes.

    At every level all folders come before all notes, and each group is
    sorted by name. Entries that disappear during the walk are left out.

    Args:
        vault_root: Root directory of the vault.

    Returns:
        FileTree with counts. Empty when the vault does not exist.
    """
    vault = Path(vault_root).absolute()
    root: list[TreeEntry] = []
    children_of: dict[Path, list[TreeEntry]] = {vault: root}

    def add(entry: VaultEntry) -> WalkAction | None:
        siblings = children_of[entry.path.parent]
        modified = _modified_time(entry.path)
        if modified is None:
            return WalkAction.SKIP

        relative = entry.path.relative_to(vault).as_posix()
        if entry.is_folder:
            folder = FolderEntry(
                name=entry.path.name,
                relative_path=relative,
                modified_time=modified,
            )
            siblings.append(folder)
            children_of[entry.path] = folder.children
        else:
            siblings.append(
                NoteEntry(
                    name=entry.path.stem,
                    absolute_path=str(entry.path),
                    relative_path=relative,
                    modified_time=modified,
                )
            )
        return None

    walk_vault(vault, add)

    return FileTree(
        vault_path=str(vault),
        root=root,
        total_notes=count_notes(root),
        total_folders=count_folders(root),
    )


def count_notes(entries: list[TreeEntry]) -> int:
    """Count notes in a tree, leaf-wise."""
    total = 0
    for entry in entries:
        if isinstance(entry, FolderEntry):
            total += count_notes(entry.children)
        else:
            total += 1
    return total


def count_folders(entries: list[TreeEntry]) -> int:
    """Count folders in a tree, each as 1 plus the folders below it."""
    total = 0
    for entry in entries:
        if isinstance(entry, FolderEntry):
            total += 1 + count_folders(entry.children)
    return total

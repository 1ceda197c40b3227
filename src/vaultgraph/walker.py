"""Depth-first vault traversal shared by the resolver, backlinks and tree.

The visibility policy lives here and nowhere else: names starting with "."
are skipped at every level, and only ``*.md`` files are reported. Callers
supply a visitor that decides what to do with each entry.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple

from .config import is_hidden_name, is_note_name

log = logging.getLogger(__name__)


class WalkAction(Enum):
    """What the walker does after a visitor returns."""

    CONTINUE = "continue"
    SKIP = "skip"  # Do not descend into this folder
    STOP = "stop"  # Abort the whole walk


class VaultEntry(NamedTuple):
    """A visible folder or note reached by the walk."""

    path: Path
    is_folder: bool


Visitor = Callable[[VaultEntry], WalkAction | None]


def list_visible(directory: Path) -> tuple[list[Path], list[Path]]:
    """List the visible subfolders and notes of one directory.

    Both lists are sorted by name (case-sensitive). An unreadable or
    vanished directory lists as empty.

    Returns:
        Tuple of (folders, notes).
    """
    try:
        children = list(directory.iterdir())
    except OSError as e:
        log.debug("Skipping unreadable directory %s: %s", directory, e)
        return [], []

    folders: list[Path] = []
    notes: list[Path] = []
    for child in children:
        if is_hidden_name(child.name):
            continue
        try:
            if child.is_dir():
                folders.append(child)
            elif is_note_name(child.name) and child.is_file():
                notes.append(child)
        except OSError as e:
            log.debug("Skipping unreadable entry %s: %s", child, e)

    folders.sort(key=lambda p: p.name)
    notes.sort(key=lambda p: p.name)
    return folders, notes


def walk_vault(root: Path, visitor: Visitor) -> bool:
    """Walk a vault depth-first, pre-order.

    In each directory every subfolder is visited (and, unless the visitor
    returns SKIP, descended into right away) before any note of that
    directory. Returning None from the visitor means CONTINUE.

    Args:
        root: Directory to walk. A missing root is an empty walk.
        visitor: Called once per visible folder and note.

    Returns:
        True if the visitor stopped the walk, False if it ran to completion.
    """
    if not root.is_dir():
        return False
    return _walk_directory(root, visitor)


def _walk_directory(directory: Path, visitor: Visitor) -> bool:
    folders, notes = list_visible(directory)

    for folder in folders:
        action = visitor(VaultEntry(folder, True))
        if action is WalkAction.STOP:
            return True
        if action is WalkAction.SKIP:
            continue
        if _walk_directory(folder, visitor):
            return True

    for note in notes:
        if visitor(VaultEntry(note, False)) is WalkAction.STOP:
            return True

    return False


def iter_notes(root: Path) -> list[Path]:
    """Return every visible note under root in walk order."""
    notes: list[Path] = []

    def collect(entry: VaultEntry) -> None:
        if not entry.is_folder:
            notes.append(entry.path)

    walk_vault(root, collect)
    return notes

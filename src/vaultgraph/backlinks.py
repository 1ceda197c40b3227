"""Backlink scanning: which notes link to a given note."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import TARGET_SEPARATOR
from .models import BacklinkGroup
from .parser import normalize_note_name, parse_links, target_note_name
from .walker import iter_notes

log = logging.getLogger(__name__)


def find_backlinks(vault_root: str | Path, note_name: str) -> list[BacklinkGroup]:
    """Find every note that links to ``note_name``.

    A link counts when its target, with any folder prefix removed, equals
    ``note_name`` case-insensitively: [[Projects/Alpha]] is a backlink of
    "Alpha". Notes named like the queried note are skipped, so a note never
    backlinks itself. Unreadable notes are skipped.

    ``note_name`` is matched as given: a folder-qualified query such as
    "Projects/Alpha" is not stripped and finds nothing.

    Args:
        vault_root: Root directory of the vault.
        note_name: Bare note name, without .md.

    Returns:
        One BacklinkGroup per linking note, in walk order. Notes without a
        matching link are omitted.
    """
    vault = Path(vault_root).absolute()
    wanted = normalize_note_name(note_name)

    if TARGET_SEPARATOR in note_name:
        log.debug("Backlink query %r is folder-qualified; it matches as a whole name", note_name)

    groups: list[BacklinkGroup] = []
    for md_file in iter_notes(vault):
        if normalize_note_name(md_file.stem) == wanted:
            continue

        try:
            content = md_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.debug("Skipping unreadable note %s: %s", md_file, e)
            continue

        matching = [
            link
            for link in parse_links(content).links
            if normalize_note_name(target_note_name(link.target)) == wanted
        ]
        if matching:
            groups.append(
                BacklinkGroup(
                    source_path=str(md_file),
                    source_name=md_file.stem,
                    links=matching,
                )
            )

    return groups

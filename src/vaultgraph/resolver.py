"""Resolution of wikilink targets to note files.

Resolution order for a target "folder/name" (first hit wins):
1. <vault>/folder/name.md, when the target has a folder part
2. <vault>/name.md
3. The first note in walk order whose filename, without .md, matches
   "name" case-insensitively

Duplicate names in different folders are not disambiguated: the walk
order decides, so callers must not rely on which one wins after the
vault changes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import NOTE_SUFFIX, TARGET_SEPARATOR, is_hidden_name
from .models import OutgoingLink
from .parser import normalize_note_name, parse_links, split_target
from .walker import VaultEntry, WalkAction, walk_vault

log = logging.getLogger(__name__)


def resolve_note(vault_root: str | Path, target: str) -> Path | None:
    """Resolve a wikilink target to an absolute note path.

    Args:
        vault_root: Root directory of the vault.
        target: Link target, e.g. "Alpha" or "Projects/Alpha".

    Returns:
        Path of the matching note, or None if nothing matches (including
        for a missing vault or a blank target).
    """
    vault = Path(vault_root).absolute()
    folder, note_name = split_target(target)

    if not note_name.strip():
        return None

    if folder:
        parts = [*folder.split(TARGET_SEPARATOR), f"{note_name}{NOTE_SUFFIX}"]
        candidate = _fixed_location(vault, parts)
        if candidate is not None:
            log.debug("Resolved %r in its folder: %s", target, candidate)
            return candidate

    candidate = _fixed_location(vault, [f"{note_name}{NOTE_SUFFIX}"])
    if candidate is not None:
        log.debug("Resolved %r at vault root: %s", target, candidate)
        return candidate

    found = find_note_by_name(vault, note_name)
    if found is None:
        log.debug("Could not resolve %r in %s", target, vault)
    return found


def _fixed_location(vault: Path, parts: list[str]) -> Path | None:
    # Hidden components (and "..") never resolve, same as in the walk
    parts = [part for part in parts if part]
    if not parts or any(is_hidden_name(part) for part in parts):
        return None

    candidate = vault.joinpath(*parts)
    try:
        if candidate.is_file():
            return candidate
    except OSError as e:
        log.debug("Skipping unreadable candidate %s: %s", candidate, e)
    return None


def find_note_by_name(vault_root: str | Path, note_name: str) -> Path | None:
    """Find the first note anywhere in the vault whose name matches.

    The comparison is case-insensitive on the filename without .md.
    """
    wanted = normalize_note_name(note_name)
    found: list[Path] = []

    def match(entry: VaultEntry) -> WalkAction | None:
        if entry.is_folder:
            return None
        if normalize_note_name(entry.path.stem) == wanted:
            found.append(entry.path)
            return WalkAction.STOP
        return None

    walk_vault(Path(vault_root).absolute(), match)
    return found[0] if found else None


def outgoing_links(vault_root: str | Path, content: str) -> list[OutgoingLink]:
    """Group the links of a note by target and resolve each target once.

    Args:
        vault_root: Root directory of the vault.
        content: Raw note text.

    Returns:
        One OutgoingLink per distinct target, in first-seen order. Targets
        with no matching note have resolved_path None.
    """
    parsed = parse_links(content)
    grouped: dict[str, OutgoingLink] = {}

    for link in parsed.links:
        entry = grouped.get(link.target)
        if entry is None:
            resolved = resolve_note(vault_root, link.target)
            entry = OutgoingLink(
                target=link.target,
                resolved_path=str(resolved) if resolved is not None else None,
            )
            grouped[link.target] = entry
        entry.links.append(link)

    return list(grouped.values())

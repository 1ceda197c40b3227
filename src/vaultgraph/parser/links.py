"""Wikilink extraction and note-name normalization."""

import re

from ..config import TARGET_SEPARATOR
from ..models import Reference, ReferenceSet, Span

# Pattern for [[target]], [[target#heading]], [[target|display]] and
# [[target#heading|display]]. Groups: 1=target, 2=heading, 3=display.
LINK_PATTERN = re.compile(r"\[\[([^\]|#]+)(?:#([^|\]]+))?(?:\|([^\]]+))?\]\]")


def parse_links(content: str) -> ReferenceSet:
    """Extract wikilinks from note content.

    Matches are non-overlapping and scanned left to right. A match whose
    target is blank after trimming is dropped. Nothing here checks that a
    target exists; see ``vaultgraph.resolver``.

    Args:
        content: Raw note text.

    Returns:
        ReferenceSet with every reference in source order, plus the
        distinct targets in first-seen order.
    """
    links: list[Reference] = []
    seen: set[str] = set()
    referenced: list[str] = []

    for match in LINK_PATTERN.finditer(content):
        target = match.group(1).strip()
        if not target:
            continue

        links.append(
            Reference(
                target=target,
                heading=_optional_group(match.group(2)),
                display_text=_optional_group(match.group(3)),
                span=Span(start=match.start(), end=match.end()),
                raw=match.group(0),
            )
        )

        if target not in seen:
            seen.add(target)
            referenced.append(target)

    return ReferenceSet(links=links, referenced_notes=referenced)


def _optional_group(value: str | None) -> str | None:
    # "[[a# |b]]" has a heading group, but nothing is left after trimming
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_note_name(name: str) -> str:
    """Return the key used for case-insensitive note identity.

    Every comparison between a link target and a filename goes through
    here, so matching does not depend on the host filesystem's case rules.
    """
    return name.lower()


def split_target(target: str) -> tuple[str | None, str]:
    """Split a target on its last "/" into (folder, note_name).

    Examples:
        "Alpha" -> (None, "Alpha")
        "Projects/Alpha" -> ("Projects", "Alpha")
        "a/b/c" -> ("a/b", "c")
    """
    if TARGET_SEPARATOR not in target:
        return None, target
    folder, note_name = target.rsplit(TARGET_SEPARATOR, 1)
    return folder, note_name


def target_note_name(target: str) -> str:
    """Return the note name of a target with any folder prefix removed."""
    return split_target(target)[1]

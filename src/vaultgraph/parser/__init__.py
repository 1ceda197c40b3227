"""Wikilink parsing."""

from ..models import Reference, ReferenceSet, Span
from .links import LINK_PATTERN, normalize_note_name, parse_links, split_target, target_note_name

__all__ = [
    "parse_links",
    "normalize_note_name",
    "split_target",
    "target_note_name",
    "LINK_PATTERN",
    "Reference",
    "ReferenceSet",
    "Span",
]

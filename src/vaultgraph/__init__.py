"""vaultgraph: wikilinks, backlinks and the note tree of a markdown vault."""

from .backlinks import find_backlinks
from .models import (
    BacklinkGroup,
    FileTree,
    FolderEntry,
    NoteEntry,
    OutgoingLink,
    Reference,
    ReferenceSet,
    Span,
    TreeEntry,
)
from .parser import normalize_note_name, parse_links
from .resolver import outgoing_links, resolve_note
from .tree import build_file_tree

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "parse_links",
    "normalize_note_name",
    "resolve_note",
    "outgoing_links",
    "find_backlinks",
    "build_file_tree",
    "Reference",
    "ReferenceSet",
    "Span",
    "BacklinkGroup",
    "OutgoingLink",
    "FileTree",
    "FolderEntry",
    "NoteEntry",
    "TreeEntry",
]

"""Pydantic models for the vault link graph."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class Span(BaseModel):
    """Half-open [start, end) offsets of a match in the source text.

    Offsets count characters (code points) of the Python string, so
    ``text[span.start:span.end]`` is the matched text.
    """

    start: int = Field(ge=0)
    end: int

    @model_validator(mode="after")
    def check_not_empty(self) -> "Span":
        if self.end <= self.start:
            raise ValueError(f"span end ({self.end}) must be after start ({self.start})")
        return self


class Reference(BaseModel):
    """A parsed [[wikilink]]."""

    target: str  # Note identifier, trimmed, case preserved; may be "folder/name"
    heading: str | None = None  # From [[target#heading]]
    display_text: str | None = None  # From [[target|display]]
    span: Span  # Offsets into the parsed text
    raw: str  # Verbatim match, brackets included

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("reference target must not be blank")
        if v != v.strip():
            raise ValueError("reference target must be trimmed")
        return v


class ReferenceSet(BaseModel):
    """All references found in one text."""

    links: list[Reference] = Field(default_factory=list)  # In source order
    referenced_notes: list[str] = Field(default_factory=list)  # Distinct targets


class BacklinkGroup(BaseModel):
    """One note that links to the queried note, with the matching links."""

    source_path: str  # Absolute path of the linking note
    source_name: str  # Its filename without .md
    links: list[Reference] = Field(default_factory=list)


class OutgoingLink(BaseModel):
    """All references to one target within a note, resolved once."""

    target: str
    links: list[Reference] = Field(default_factory=list)
    resolved_path: str | None = None  # None when no note matches the target


class FolderEntry(BaseModel):
    """A folder in the vault tree."""

    type: Literal["folder"] = "folder"
    name: str
    relative_path: str  # Relative to the vault root, "/"-separated
    modified_time: int  # Seconds since the epoch
    children: list["TreeEntry"] = Field(default_factory=list)


class NoteEntry(BaseModel):
    """A note in the vault tree."""

    type: Literal["note"] = "note"
    name: str  # Filename without .md
    absolute_path: str
    relative_path: str  # Relative to the vault root, "/"-separated, with .md
    modified_time: int  # Seconds since the epoch


TreeEntry = Annotated[FolderEntry | NoteEntry, Field(discriminator="type")]

FolderEntry.model_rebuild()


class FileTree(BaseModel):
    """Hierarchical view of a vault: folders first, then notes, at every level."""

    vault_path: str
    root: list[TreeEntry] = Field(default_factory=list)
    total_notes: int = 0
    total_folders: int = 0

"""Tests for backlink scanning."""

import os
import sys
from pathlib import Path

import pytest
from conftest import write_note

from vaultgraph import walker
from vaultgraph.backlinks import find_backlinks


def _sources(groups) -> list[str]:
    return [group.source_name for group in groups]


class TestFindBacklinks:
    """Tests for find_backlinks."""

    def test_empty_vault(self, vault: Path):
        """An empty vault has no backlinks."""
        assert find_backlinks(vault, "Anything") == []

    def test_missing_vault(self, tmp_path: Path):
        """A missing vault has no backlinks."""
        assert find_backlinks(tmp_path / "missing", "Anything") == []

    def test_single_backlink(self, vault: Path):
        """A link from A to B makes A a backlink of B."""
        source = write_note(vault, "A.md", "See [[B]] for details.")
        write_note(vault, "B.md", "Target")

        groups = find_backlinks(vault, "B")

        assert len(groups) == 1
        assert groups[0].source_name == "A"
        assert groups[0].source_path == str(source)
        assert [link.raw for link in groups[0].links] == ["[[B]]"]

    def test_self_reference_excluded(self, vault: Path):
        """A note linking to itself is not its own backlink."""
        write_note(vault, "A.md", "I am [[A]].")

        assert find_backlinks(vault, "A") == []

    def test_self_exclusion_ignores_case_and_folder(self, vault: Path):
        """Any note named like the query is skipped, wherever it lives."""
        write_note(vault, "Sub/a.md", "[[A]]")
        write_note(vault, "Other.md", "[[A]]")

        assert _sources(find_backlinks(vault, "A")) == ["Other"]

    def test_folder_prefix_stripped_from_links(self, vault: Path):
        """[[Projects/Alpha]] counts as a backlink of Alpha."""
        write_note(vault, "Index.md", "Working on [[Projects/Alpha]].")

        groups = find_backlinks(vault, "Alpha")

        assert _sources(groups) == ["Index"]
        assert groups[0].links[0].target == "Projects/Alpha"

    def test_case_insensitive_match(self, vault: Path):
        """Link targets and the query compare without case."""
        write_note(vault, "One.md", "[[alpha]]")
        write_note(vault, "Two.md", "[[ALPHA|shout]]")

        assert sorted(_sources(find_backlinks(vault, "Alpha"))) == ["One", "Two"]

    def test_only_matching_links_kept(self, vault: Path):
        """A group carries only the links that point at the queried note."""
        write_note(vault, "Mixed.md", "[[Alpha]] [[Beta]] [[Alpha#Goals|goals]] [[Gamma]]")

        groups = find_backlinks(vault, "Alpha")

        assert [(link.target, link.heading) for link in groups[0].links] == [
            ("Alpha", None),
            ("Alpha", "Goals"),
        ]

    def test_notes_without_matches_omitted(self, vault: Path):
        """Notes with no matching link do not produce a group."""
        write_note(vault, "Links.md", "[[Alpha]]")
        write_note(vault, "Unrelated.md", "[[Beta]]")
        write_note(vault, "Plain.md", "No links")

        assert _sources(find_backlinks(vault, "Alpha")) == ["Links"]

    def test_hidden_entries_ignored(self, sample_vault: Path):
        """Links from notes in dot folders are not backlinks."""
        groups = find_backlinks(sample_vault, "Alpha")

        assert all(".obsidian" not in group.source_path for group in groups)
        assert sorted(_sources(groups)) == ["Beta", "Home"]

    def test_non_markdown_files_ignored(self, vault: Path):
        """Only .md files are scanned."""
        write_note(vault, "notes.txt", "[[Alpha]]")
        write_note(vault, "Real.md", "[[Alpha]]")

        assert _sources(find_backlinks(vault, "Alpha")) == ["Real"]

    def test_walk_order(self, vault: Path):
        """Groups follow the walk order: folders first, names sorted."""
        write_note(vault, "z.md", "[[T]]")
        write_note(vault, "a.md", "[[T]]")
        write_note(vault, "Folder/m.md", "[[T]]")

        assert _sources(find_backlinks(vault, "T")) == ["m", "a", "z"]

    def test_folder_qualified_query_matches_nothing(self, vault: Path):
        """The query is compared as a whole; folder prefixes are not stripped."""
        write_note(vault, "Index.md", "[[Projects/Alpha]] and [[Alpha]]")

        assert find_backlinks(vault, "Projects/Alpha") == []

    def test_undecodable_note_skipped(self, vault: Path):
        """Notes that are not valid UTF-8 are skipped silently."""
        (vault / "Binary.md").write_bytes(b"\xff\xfe[[Alpha]]\x80")
        write_note(vault, "Good.md", "[[Alpha]]")

        assert _sources(find_backlinks(vault, "Alpha")) == ["Good"]

    def test_note_failing_read_skipped(self, vault: Path, monkeypatch: pytest.MonkeyPatch):
        """A note whose read fails with FileNotFoundError is skipped."""
        write_note(vault, "Gone.md", "[[Alpha]]")
        write_note(vault, "Kept.md", "[[Alpha]]")
        real_read_text = Path.read_text

        def flaky_read_text(self, *args, **kwargs):
            if self.name == "Gone.md":
                raise FileNotFoundError(2, "No such file or directory", str(self))
            return real_read_text(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", flaky_read_text)

        assert _sources(find_backlinks(vault, "Alpha")) == ["Kept"]

    def test_note_deleted_after_listing_skipped(
        self, vault: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """A note removed between listing and reading is silently skipped."""
        write_note(vault, "Gone.md", "[[Alpha]]")
        write_note(vault, "Kept.md", "[[Alpha]]")
        real_list_visible = walker.list_visible

        def list_then_delete(directory: Path):
            folders, notes = real_list_visible(directory)
            (directory / "Gone.md").unlink(missing_ok=True)
            return folders, notes

        monkeypatch.setattr(walker, "list_visible", list_then_delete)

        assert _sources(find_backlinks(vault, "Alpha")) == ["Kept"]

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_note_skipped(self, vault: Path):
        """Notes that cannot be read are skipped silently."""
        locked = write_note(vault, "Locked.md", "[[Alpha]]")
        write_note(vault, "Open.md", "[[Alpha]]")
        locked.chmod(0o000)
        try:
            assert _sources(find_backlinks(vault, "Alpha")) == ["Open"]
        finally:
            locked.chmod(0o644)


def test_concurrent_queries_agree(sample_vault: Path):
    """Parallel scans need no coordination and return the same result."""
    from concurrent.futures import ThreadPoolExecutor

    expected = find_backlinks(sample_vault, "Alpha")
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: find_backlinks(sample_vault, "Alpha"), range(8)))

    assert all(result == expected for result in results)

"""Shared test fixtures for the vaultgraph test suite.

Design:
- vault: isolated vault directory under tmp_path
- write_note: helper to create notes (and their folders) inside a vault
- runner / cli_invoke: CliRunner with VAULTGRAPH_VAULT_ROOT pointed at the vault
"""

import os
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

from vaultgraph.cli import cli

# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def vault(tmp_path: Path) -> Generator[Path, None, None]:
    """Create an isolated, empty vault directory.

    Sets VAULTGRAPH_VAULT_ROOT for the duration of the test, then restores it.

    Usage:
        def test_something(vault):
            (vault / "note.md").write_text("[[Other]]")
    """
    vault_root = tmp_path / "vault"
    vault_root.mkdir()

    original = os.environ.get("VAULTGRAPH_VAULT_ROOT")
    os.environ["VAULTGRAPH_VAULT_ROOT"] = str(vault_root)

    yield vault_root

    if original is not None:
        os.environ["VAULTGRAPH_VAULT_ROOT"] = original
    else:
        os.environ.pop("VAULTGRAPH_VAULT_ROOT", None)


@pytest.fixture
def sample_vault(vault: Path) -> Path:
    """Vault with a few linked notes across folders.

    Creates:
    - Home.md            -> [[Alpha]], [[Projects/Beta#Plan|the plan]]
    - Projects/Alpha.md  -> [[Beta]], [[Home]]
    - Projects/Beta.md   -> [[Projects/Alpha]]
    - Archive/Old.md     -> no links
    - .obsidian/app.md   -> [[Alpha]] (hidden, must be ignored)
    """
    write_note(vault, "Home.md", "Start at [[Alpha]] and read [[Projects/Beta#Plan|the plan]].")
    write_note(vault, "Projects/Alpha.md", "Depends on [[Beta]]. Back to [[Home]].")
    write_note(vault, "Projects/Beta.md", "Builds on [[Projects/Alpha]].")
    write_note(vault, "Archive/Old.md", "Nothing to see.")
    write_note(vault, ".obsidian/app.md", "[[Alpha]]")
    return vault


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def cli_invoke(runner: CliRunner, vault: Path):
    """Helper for invoking the CLI against the test vault.

    Usage:
        def test_tree(cli_invoke):
            result = cli_invoke(["tree"])
            assert result.exit_code == 0
    """

    def _invoke(args: list[str], input: str | None = None, catch_exceptions: bool = False):
        return runner.invoke(
            cli,
            args,
            input=input,
            catch_exceptions=catch_exceptions,
            env={"VAULTGRAPH_VAULT_ROOT": str(vault)},
        )

    return _invoke


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def write_note(vault_root: Path, rel_path: str, content: str = "") -> Path:
    """Create a note (and any missing folders) inside a vault.

    Usage in tests:
        from conftest import write_note
        note = write_note(vault, "Projects/Alpha.md", "[[Beta]]")
    """
    path = vault_root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path

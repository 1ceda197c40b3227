"""Configuration for vaultgraph.

This module contains the constants that define what a vault looks like on
disk, and the lookup of the vault root used by the ``vg`` CLI.

The core operations never read configuration themselves: the vault root is
always an explicit argument. Only the CLI layer calls ``get_vault_root``.
"""

import os
from pathlib import Path


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""

    pass


# File suffix of a note. Compared case-sensitively, like the application does.
NOTE_SUFFIX = ".md"

# Names starting with this prefix (files and folders) are invisible to every
# traversal: .obsidian/, .git/, .trash/ and friends.
HIDDEN_PREFIX = "."

# Environment variable naming the default vault for the CLI.
VAULT_ROOT_ENV = "VAULTGRAPH_VAULT_ROOT"

# Separator used in note identities ("folder/name") regardless of host OS.
TARGET_SEPARATOR = "/"


def get_vault_root(explicit: str | Path | None = None) -> Path:
    """Get the vault root directory.

    Discovery order:
    1. Explicit path (the CLI's --vault option)
    2. VAULTGRAPH_VAULT_ROOT environment variable
    3. Error with helpful message

    The returned path is not checked for existence; core operations degrade
    to empty results on a missing vault.

    Raises:
        ConfigurationError: If no vault root is configured.
    """
    if explicit:
        return Path(explicit).expanduser()

    root = os.environ.get(VAULT_ROOT_ENV)
    if root:
        return Path(root).expanduser()

    raise ConfigurationError(
        "No vault configured. Options:\n"
        "  1. Pass --vault /path/to/vault\n"
        f"  2. Set {VAULT_ROOT_ENV} to an existing vault directory"
    )


def is_hidden_name(name: str) -> bool:
    """Return True for file or folder names excluded from every traversal."""
    return name.startswith(HIDDEN_PREFIX)


def is_note_name(name: str) -> bool:
    """Return True for file names that count as notes."""
    return name.endswith(NOTE_SUFFIX) and len(name) > len(NOTE_SUFFIX)

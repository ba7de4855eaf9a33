"""Locations of the program's data directories and helpers to list them."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Union

from platformdirs import user_data_dir

ROOT_DIR = "GoogCraftImages"
LOGS_DIR = "logs"
FILES_DIR = "files"

HOME_ENV = "CRAFTLINK_HOME"


def root_path() -> Path:
    """The program's root directory under the user's roaming data directory.

    Setting ``CRAFTLINK_HOME`` replaces the user data directory as the base.
    """
    base = os.environ.get(HOME_ENV) or user_data_dir(roaming=True)
    return Path(base) / ROOT_DIR


def current_path() -> str:
    """The current working directory with forward slashes."""
    return Path.cwd().as_posix()


def display_files(path: Union[str, Path]) -> List[str]:
    """Print the names of the entries in ``path`` and return them, sorted."""
    directory = Path(path)
    if not directory.exists():
        print(f"'{directory}' does not exist.")
        return []

    print(f"Files in '{directory}':")
    names = sorted(entry.name for entry in directory.iterdir())
    for name in names:
        print(name)
    return names


def display_received_files() -> List[str]:
    """Print and return the files in the received-files directory."""
    return display_files(root_path() / FILES_DIR)


def display_log_files() -> List[str]:
    """Print and return the files in the log directory."""
    return display_files(root_path() / LOGS_DIR)


def find_file_path(filename: str) -> Path:
    """Where ``filename`` lives: in the log directory if it is there, else in files."""
    root = root_path()
    in_logs = root / LOGS_DIR / filename
    if in_logs.exists():
        return in_logs
    return root / FILES_DIR / filename
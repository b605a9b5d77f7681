"""Process-wide CLI state shared between the Typer callback and config discovery."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CliState:
    """Options given before the command name."""

    config_path: Path | None = None
    verbosity: int = 0


_state = CliState()


def get_state() -> CliState:
    """Get the CLI state singleton."""
    return _state


def get_config_path() -> Path | None:
    """Get the config path given with ``--config``, if any."""
    return _state.config_path


def set_config_path(path: Path | None) -> None:
    """Set the config path given with ``--config``."""
    _state.config_path = path


def reset() -> None:
    """Forget all CLI options (used between tests)."""
    _state.config_path = None
    _state.verbosity = 0

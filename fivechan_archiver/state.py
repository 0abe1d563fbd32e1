"""Per-board JSON state files.

Every mutation reads the whole record, changes it and writes it back;
there is no partial-update API.
"""
from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from .models import BoardState

LOG = logging.getLogger(__name__)

APP_NAME = "5chan-archiver"


def default_state_dir() -> Path:
    """Return the default directory for board state files.

    Follows XDG_DATA_HOME, falling back to ~/.local/share.
    """
    base = os.environ.get("XDG_DATA_HOME", "").strip()
    data_home = Path(base).expanduser() if base else Path.home() / ".local" / "share"
    return data_home / APP_NAME / "5chan_archiver_states"


def _slug_board(board: str) -> str:
    board = (board or "").strip()
    if not board:
        return "unknown"
    # Keep it filesystem-safe
    return re.sub(r"[^A-Za-z0-9._-]+", "_", board)


def state_path_for_board(board: str, state_dir: Path | str | None = None) -> Path:
    base = Path(state_dir) if state_dir is not None else default_state_dir()
    return base / f"{_slug_board(board)}.json"


def load_state(path: Path | str) -> BoardState:
    """Load a board's state, defaulting on a missing or malformed file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
        if not isinstance(data, dict):
            raise ValueError("state root is not an object")
        return BoardState.from_dict(data)
    except FileNotFoundError:
        return BoardState()
    except (OSError, ValueError, KeyError, TypeError) as e:
        LOG.warning("Ignoring unreadable state file %s: %s", path, e)
        return BoardState()


def save_state(path: Path | str, state: BoardState) -> None:
    """Write the full state via a temp file and rename."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(state.to_dict(), indent=2) + "\n"

    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(payload)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise

"""Exceptions raised by the archiver."""
from __future__ import annotations


class ArchiverError(Exception):
    """Base class for archiver errors."""


class BoardLockedError(ArchiverError):
    """Another live archiver process holds the board."""

    def __init__(self, board: str, pid: int):
        self.board = board
        self.pid = pid
        super().__init__(f"Another archiver (PID {pid}) is already running for {board}")


class ModeratorRoleError(ArchiverError):
    """The signer cannot moderate a remote board."""

    def __init__(self, board: str, address: str):
        self.board = board
        self.address = address
        super().__init__(
            f"Signer {address} does not have a moderator role on remote subplebbit {board}. "
            "Ask the subplebbit owner to add this address as a moderator."
        )


class RpcError(ArchiverError):
    """A call to the plebbit RPC node failed."""

    def __init__(self, method: str, message: str, code: int | None = None):
        self.method = method
        self.code = code
        super().__init__(f"{method}: {message}")

"""Signer persistence and moderator role checks."""
from __future__ import annotations

import logging
from pathlib import Path

from .errors import ModeratorRoleError
from .models import Signer, Subplebbit
from .state import load_state, save_state

LOG = logging.getLogger(__name__)

MODERATION_ROLES = ("moderator", "admin", "owner")


def ensure_signer(client, state_path: Path, board: str) -> Signer:
    """Return the board's signer, creating and persisting one on first run."""
    state = load_state(state_path)
    stored = state.signers.get(board)
    if stored and stored.get("privateKey"):
        return client.create_signer(private_key=stored["privateKey"])

    signer = client.create_signer()
    state.signers[board] = signer.to_dict()
    save_state(state_path, state)
    LOG.info("Created signer %s for %s", signer.address, board)
    return signer


def has_moderation_role(subplebbit: Subplebbit, address: str) -> bool:
    role = (subplebbit.roles.get(address) or {}).get("role")
    return role in MODERATION_ROLES


def ensure_moderator_role(client, subplebbit: Subplebbit, signer: Signer) -> None:
    """Make sure signer can moderate the board.

    Local boards get the role granted; remote ones need their owner to act.
    """
    if has_moderation_role(subplebbit, signer.address):
        return

    board = subplebbit.address
    if board not in client.list_local_subplebbits():
        raise ModeratorRoleError(board, signer.address)

    roles = dict(subplebbit.roles)
    roles[signer.address] = {"role": "moderator"}
    client.edit_subplebbit(board, {"roles": roles})
    subplebbit.roles = roles
    LOG.info("Granted moderator role on %s to %s", board, signer.address)

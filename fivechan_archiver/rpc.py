"""JSON-RPC client for a plebbit RPC node."""
from __future__ import annotations

import itertools
import logging

from .errors import RpcError
from .http import requests
from .models import RankedPage, Signer, Subplebbit

LOG = logging.getLogger(__name__)


class PlebbitRpc:
    """Thin synchronous client; one instance per archiver."""

    def __init__(self, url: str, timeout: float = 20):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._ids = itertools.count(1)

    def call(self, method: str, params: list | None = None):
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            r = requests.post(self.url, json=payload, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            raise RpcError(method, str(e)) from e
        except ValueError as e:
            raise RpcError(method, f"invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise RpcError(method, "malformed response")
        err = data.get("error")
        if err:
            if isinstance(err, dict):
                raise RpcError(method, err.get("message", "unknown error"), err.get("code"))
            raise RpcError(method, str(err))
        return data.get("result")

    # ------------------------------------------------------------------
    # Identity

    def create_signer(self, private_key: str | None = None) -> Signer:
        params = [{"type": "ed25519", "privateKey": private_key}] if private_key else []
        return Signer.from_dict(self.call("createSigner", params))

    # ------------------------------------------------------------------
    # Boards

    def list_local_subplebbits(self) -> list[str]:
        return list(self.call("listSubplebbits") or [])

    def get_subplebbit(self, address: str) -> Subplebbit:
        result = self.call("getSubplebbit", [{"address": address}])
        if not isinstance(result, dict) or not result.get("address"):
            raise RpcError("getSubplebbit", f"malformed subplebbit for {address}")
        return Subplebbit.from_dict(result)

    def get_page(self, address: str, cid: str) -> RankedPage:
        result = self.call("getSubplebbitPage", [{"subplebbitAddress": address, "cid": cid}])
        return RankedPage.from_dict(result or {})

    def edit_subplebbit(self, address: str, edit: dict) -> None:
        self.call("editSubplebbit", [address, edit])

    # ------------------------------------------------------------------
    # Moderation

    def publish_moderation(self, address: str, comment_cid: str, moderation: dict, signer: Signer) -> None:
        self.call(
            "publishCommentModeration",
            [
                {
                    "subplebbitAddress": address,
                    "commentCid": comment_cid,
                    "commentModeration": moderation,
                    "signer": signer.to_dict(),
                }
            ],
        )
        LOG.debug("Published %s for %s on %s", moderation, comment_cid, address)

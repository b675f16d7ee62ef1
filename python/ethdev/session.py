"""JSON-RPC session with an already running devchain node."""

from __future__ import annotations

import json
from typing import Any, List, Optional

import httpx

from ethdev.config import EffectiveConfig
from ethdev.errors import NetworkError
from ethdev.logging import get_logger

log = get_logger(__name__)


class NodeSession:
    """
    Thin JSON-RPC client. Use as a context manager so the connection pool is
    closed when the command is done:

        with open_session(cfg) as session:
            session.accounts()
    """

    def __init__(self, rpc_url: str, *, timeout: float = 10.0) -> None:
        self.rpc_url = rpc_url
        self._client = httpx.Client(timeout=timeout)
        self._next_id = 1

    def request(self, method: str, params: Optional[list] = None) -> Any:
        payload = {"jsonrpc": "2.0", "id": self._next_id, "method": method, "params": params or []}
        self._next_id += 1
        log.debug("rpc request", extra={"method": method, "url": self.rpc_url})
        try:
            response = self._client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} failed: {e}", url=self.rpc_url, method=method).with_cause(e) from e
        except json.JSONDecodeError as e:
            raise NetworkError(f"{method} returned invalid JSON", url=self.rpc_url, method=method).with_cause(e) from e
        if not isinstance(data, dict):
            raise NetworkError(
                f"{method} returned a non-object reply ({type(data).__name__})", url=self.rpc_url, method=method
            )
        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise NetworkError(f"{method}: {message}", url=self.rpc_url, method=method, error=error)
        return data.get("result")

    def accounts(self) -> List[str]:
        return list(self.request("eth_accounts") or [])

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "NodeSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def open_session(cfg: EffectiveConfig, *, rpc_url: Optional[str] = None) -> NodeSession:
    return NodeSession(rpc_url or cfg.rpc_url)


__all__ = ["NodeSession", "open_session"]

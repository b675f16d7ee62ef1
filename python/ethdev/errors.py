"""
ethdev — errors
---------------

A small, consistent error system for the devchain tooling.

Design goals
------------
- One root `EthdevError` with machine-friendly `code` and optional `data`.
- Concrete subclasses for the failure domains the tool actually has
  (configuration, filesystem, process spawn, node session).
- Safe JSON representation (`to_dict`) suitable for logs and `--log-format json`.

The node binary exiting non-zero during `init` is deliberately *not* an error
type: its own stderr is the diagnostic channel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    INTERNAL = "ETHDEV/INTERNAL"

    # Config / bootstrap
    CONFIG = "ETHDEV/CONFIG"
    GENESIS_CREATED = "ETHDEV/GENESIS_CREATED"
    ACCOUNT_INDEX = "ETHDEV/CONFIG/ACCOUNT_INDEX"

    # Filesystem / processes / network
    IO = "ETHDEV/IO"
    PROCESS_SPAWN = "ETHDEV/PROCESS/SPAWN"
    NETWORK = "ETHDEV/NETWORK"


@dataclass(eq=False)
class EthdevError(Exception):
    """
    Root error for ethdev components.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for the terminal; avoid leaking passwords.
    data: dict
        Optional machine data (paths, indices, urls). Must be JSON-serializable.
    cause: Optional[BaseException]
        Wrapped original exception; not included in equality comparison.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def with_cause(self, exc: BaseException) -> "EthdevError":
        self.cause = exc
        self.__cause__ = exc
        return self

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        out = {
            "code": str(getattr(self.code, "value", self.code)),
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:
        return self.message


class ConfigurationError(EthdevError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=ErrorCode.CONFIG, message=message, data=_jsonmap(data))


class GenesisCreated(ConfigurationError):
    """Raised after the genesis template was copied into place; the operator re-runs."""

    def __init__(self, path: Any) -> None:
        super().__init__(
            message=(
                f"Created genesis file at {path}. Review it, then run the same "
                "command again to initialize and start the devchain."
            ),
            path=path,
        )
        self.code = ErrorCode.GENESIS_CREATED


class AccountIndexError(ConfigurationError):
    def __init__(self, index: int, available: int) -> None:
        super().__init__(
            message=f"account index {index} out of range ({available} accounts known)",
            index=index,
            available=available,
        )
        self.code = ErrorCode.ACCOUNT_INDEX


class FilesystemError(EthdevError):
    def __init__(self, message="filesystem error", **data: Any) -> None:
        super().__init__(code=ErrorCode.IO, message=message, data=_jsonmap(data))


class ProcessSpawnError(EthdevError):
    def __init__(self, message="could not start process", **data: Any) -> None:
        super().__init__(code=ErrorCode.PROCESS_SPAWN, message=message, data=_jsonmap(data))


class NetworkError(EthdevError):
    def __init__(self, message="network error", **data: Any) -> None:
        super().__init__(code=ErrorCode.NETWORK, message=message, data=_jsonmap(data))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def filesystem_error(exc: OSError, **ctx: Any) -> FilesystemError:
    """Wrap an OSError keeping its message verbatim."""
    return FilesystemError(str(exc), **ctx).with_cause(exc)  # type: ignore[return-value]


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest.
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (list, tuple)):
        return [_coerce_json(i) for i in v]
    if isinstance(v, dict):
        return {str(k): _coerce_json(i) for k, i in v.items()}
    return str(v)


EXIT_CODES = {
    ErrorCode.CONFIG: 2,
    ErrorCode.GENESIS_CREATED: 2,
    ErrorCode.ACCOUNT_INDEX: 2,
}


def exit_code_for(err: EthdevError) -> int:
    """Process exit code for the CLI: configuration problems are 2, everything else 1."""
    return EXIT_CODES.get(err.code, 1)  # type: ignore[arg-type]


__all__ = [
    "ErrorCode",
    "EthdevError",
    "ConfigurationError",
    "GenesisCreated",
    "AccountIndexError",
    "FilesystemError",
    "ProcessSpawnError",
    "NetworkError",
    "filesystem_error",
    "exit_code_for",
]

"""
ethdev configuration resolver.

Goals
-----
- Layered settings with per-field precedence:
    1) Explicit CLI flags (highest)
    2) Project configuration file (`ethdev.toml` / `ethdev.json`)
    3) Built-in literals (lowest)
  Each field has its own fallback chain; a project section never replaces
  another section wholesale.
- One frozen `EffectiveConfig` per invocation, passed explicitly down the call
  chain.
- Paths resolve against the operator's working directory, never against the
  tool's install location.

Project file layout
-------------------
    [node]
    binary = "geth"

    [devchain]
    datadir = "devchain"
    identity = "ethdev"
    port = 30303
    rpchost = "localhost"
    rpcport = 8545
    rpccorsdomain = "*"
    verbosity = 3
    accounts = 3
    password = "ethdev"
    mine = true
    static_nodes = ["enode://...@127.0.0.1:30304"]
    # genesis = "chain/genesis.json"

    [transaction]
    gas = 3000000
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ethdev.errors import ConfigurationError, filesystem_error

TOOL_NAME = "ethdev"

CONFIG_ENV = "ETHDEV_CONFIG"
BINARY_ENV = "ETHDEV_GETH"
PROJECT_FILENAMES = ("ethdev.toml", "ethdev.json")

GENESIS_FILENAME = "genesis.json"

DEVCHAIN_KEYS = (
    "datadir",
    "genesis",
    "identity",
    "port",
    "rpchost",
    "rpcport",
    "rpccorsdomain",
    "verbosity",
    "accounts",
    "password",
    "mine",
    "static_nodes",
)

DEFAULT_BINARY = "geth"
DEFAULT_DATADIR = "devchain"
DEFAULT_IDENTITY = TOOL_NAME
DEFAULT_PORT = 30303
DEFAULT_RPC_HOST = "localhost"
DEFAULT_RPC_PORT = 8545
DEFAULT_CORS = "*"
DEFAULT_VERBOSITY = 3
DEFAULT_ACCOUNTS = 3
DEFAULT_PASSWORD = TOOL_NAME
DEFAULT_MINE = True


def _expand(p: str | Path, base: Path) -> Path:
    path = Path(p).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def _split_list(v: str) -> List[str]:
    return [s.strip() for s in v.split(",") if s.strip()]


# ------------------------------
# Project configuration
# ------------------------------


@dataclass(frozen=True)
class ProjectConfig:
    """Parsed project configuration file; empty sections when there is no file."""

    node: Mapping[str, Any] = field(default_factory=dict)
    devchain: Mapping[str, Any] = field(default_factory=dict)
    transaction: Mapping[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], path: Optional[Path] = None) -> "ProjectConfig":
        unknown = set(data) - {"node", "devchain", "transaction"}
        if unknown:
            raise ConfigurationError(
                f"unknown section(s) in project config: {', '.join(sorted(unknown))}",
                path=path,
            )
        sections = {}
        for name in ("node", "devchain", "transaction"):
            value = data.get(name) or {}
            if not isinstance(value, Mapping):
                raise ConfigurationError(f"[{name}] must be a table", path=path)
            sections[name] = dict(value)
        stray = set(sections["devchain"]) - set(DEVCHAIN_KEYS)
        if stray:
            raise ConfigurationError(
                f"unknown [devchain] key(s): {', '.join(sorted(stray))}",
                path=path,
            )
        return cls(path=path, **sections)


def _load_file(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    try:
        with path.open("rb") as f:
            if suffix in {".toml", ".tml"}:
                return tomllib.load(f)
            if suffix == ".json":
                return json.load(f)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"cannot parse {path}: {e}", path=path) from e
    except OSError as e:
        raise filesystem_error(e, path=path) from e
    raise ConfigurationError(f"Unsupported config format: {suffix}. Use .toml or .json", path=path)


def find_project_file(cwd: Optional[Path] = None) -> Optional[Path]:
    base = Path(cwd) if cwd else Path.cwd()
    for name in PROJECT_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_project(config_file: Optional[str | Path] = None, *, cwd: Optional[Path] = None) -> ProjectConfig:
    """
    Load the project configuration.

    An explicit `config_file` (or `ETHDEV_CONFIG`) must exist. Without one the
    working directory is searched for `ethdev.toml` then `ethdev.json`; finding
    neither yields an empty project.
    """
    base = Path(cwd) if cwd else Path.cwd()
    explicit = config_file or os.environ.get(CONFIG_ENV)
    if explicit:
        path = _expand(explicit, base)
        if not path.is_file():
            raise ConfigurationError(f"config file not found: {path}", path=path)
    else:
        path = find_project_file(base)
        if path is None:
            return ProjectConfig()
    data = _load_file(path)
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{path} must contain a table/object at the top level", path=path)
    return ProjectConfig.from_mapping(data, path=path)


# ------------------------------
# Effective devchain settings
# ------------------------------


@dataclass(frozen=True)
class DevchainFlags:
    """Flags of the `devchain` command. `None` means "not given on the command line"."""

    binary: Optional[str] = None
    datadir: Optional[str | Path] = None
    identity: Optional[str] = None
    port: Optional[int] = None
    rpchost: Optional[str] = None
    rpcport: Optional[int] = None
    rpccorsdomain: Optional[str] = None
    verbosity: Optional[int] = None
    accounts: Optional[int] = None
    password: Optional[str] = None
    mine: Optional[bool] = None
    reset: bool = False


@dataclass(frozen=True)
class EffectiveConfig:
    binary: str
    datadir: Path
    genesis: Path
    identity: str
    port: int
    rpchost: str
    rpcport: int
    rpccorsdomain: Tuple[str, ...]
    verbosity: int
    accounts: int
    password: str
    mine: bool
    reset: bool = False
    static_nodes: Tuple[str, ...] = ()

    @property
    def rpc_url(self) -> str:
        return f"http://{self.rpchost}:{self.rpcport}"

    @property
    def cors(self) -> str:
        return ",".join(self.rpccorsdomain)

    def to_dict(self) -> Dict[str, Any]:
        # Path → str, tuple → list for JSON friendliness
        out: Dict[str, Any] = {}
        for k, v in asdict(self).items():
            if isinstance(v, Path):
                v = str(v)
            elif isinstance(v, tuple):
                v = list(v)
            out[k] = v
        return out


def _pick(flag: Any, project: Mapping[str, Any], key: str, default: Any) -> Any:
    if flag is not None:
        return flag
    value = project.get(key)
    if value is not None:
        return value
    return default


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}", field=name)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}", field=name) from e


def _as_origins(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        origins = _split_list(value)
    elif isinstance(value, (list, tuple)):
        origins = [str(v).strip() for v in value if str(v).strip()]
    else:
        raise ConfigurationError(f"rpccorsdomain must be a string or list, got {value!r}", field="rpccorsdomain")
    if not origins:
        raise ConfigurationError("rpccorsdomain must name at least one origin (use \"*\" for any)", field="rpccorsdomain")
    return tuple(origins)


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be true or false, got {value!r}", field=name)
    return value


def _as_peers(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError("static_nodes must be a list of enode URLs", field="static_nodes")
    return tuple(str(v) for v in value)


def _genesis_path(
    flags: DevchainFlags, section: Mapping[str, Any], datadir: Path, base: Path
) -> Path:
    explicit = section.get("genesis")
    if explicit:
        return _expand(explicit, base)
    custom_datadir = flags.datadir is not None or section.get("datadir") is not None
    root = datadir.parent if custom_datadir else base
    return root / GENESIS_FILENAME


def resolve_devchain(
    flags: Optional[DevchainFlags] = None,
    project: Optional[ProjectConfig] = None,
    *,
    cwd: Optional[Path] = None,
) -> EffectiveConfig:
    """
    Merge flags, project settings and built-in literals into an EffectiveConfig.

    Pure: reads nothing from disk. `cwd` defaults to the process working
    directory and anchors every relative path.
    """
    flags = flags or DevchainFlags()
    project = project or ProjectConfig()
    section = project.devchain
    base = Path(cwd).resolve() if cwd else Path.cwd().resolve()

    datadir = _expand(_pick(flags.datadir, section, "datadir", DEFAULT_DATADIR), base)
    binary = _pick(flags.binary, project.node, "binary", DEFAULT_BINARY)

    cfg = EffectiveConfig(
        binary=str(binary),
        datadir=datadir,
        genesis=_genesis_path(flags, section, datadir, base),
        identity=str(_pick(flags.identity, section, "identity", DEFAULT_IDENTITY)),
        port=_as_int(_pick(flags.port, section, "port", DEFAULT_PORT), "port"),
        rpchost=str(_pick(flags.rpchost, section, "rpchost", DEFAULT_RPC_HOST)),
        rpcport=_as_int(_pick(flags.rpcport, section, "rpcport", DEFAULT_RPC_PORT), "rpcport"),
        rpccorsdomain=_as_origins(_pick(flags.rpccorsdomain, section, "rpccorsdomain", DEFAULT_CORS)),
        verbosity=_as_int(_pick(flags.verbosity, section, "verbosity", DEFAULT_VERBOSITY), "verbosity"),
        accounts=_as_int(_pick(flags.accounts, section, "accounts", DEFAULT_ACCOUNTS), "accounts"),
        password=str(_pick(flags.password, section, "password", DEFAULT_PASSWORD)),
        mine=_as_bool(_pick(flags.mine, section, "mine", DEFAULT_MINE), "mine"),
        reset=bool(flags.reset),
        static_nodes=_as_peers(section.get("static_nodes")),
    )
    _validate(cfg)
    return cfg


def _validate(cfg: EffectiveConfig) -> None:
    for name in ("port", "rpcport"):
        value = getattr(cfg, name)
        if not (1 <= value <= 65535):
            raise ConfigurationError(f"Invalid {name} {value}", field=name)
    if not (0 <= cfg.verbosity <= 6):
        raise ConfigurationError(f"verbosity must be between 0 and 6, got {cfg.verbosity}", field="verbosity")
    if cfg.accounts < 0:
        raise ConfigurationError(f"accounts must not be negative, got {cfg.accounts}", field="accounts")
    if not cfg.binary:
        raise ConfigurationError("node binary must not be empty", field="binary")


__all__ = [
    "TOOL_NAME",
    "CONFIG_ENV",
    "BINARY_ENV",
    "GENESIS_FILENAME",
    "ProjectConfig",
    "DevchainFlags",
    "EffectiveConfig",
    "find_project_file",
    "load_project",
    "resolve_devchain",
]

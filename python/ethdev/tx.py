"""
Transaction options for commands that submit transactions to the devchain.

`format_options` turns what an operator typed into the mapping the node
expects:

    >>> format_options({"from": "0", "value": "1.5"}, {"gas": 90000}, ["0xabc..."])
    {'gas': 90000, 'from': '0xabc...', 'value': 1500000000000000000}

Amounts go through `decimal` all the way; wei values overflow the exact range
of a float long before they get interesting.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from web3 import Web3

from ethdev.errors import AccountIndexError, ConfigurationError

TX_FIELDS = ("from", "to", "value", "gas", "gasPrice", "nonce", "data")
DEFAULT_UNIT = "ether"

Accounts = Union[Sequence[str], Callable[[], Sequence[str]]]


def to_base_unit(amount: Any, unit: str = DEFAULT_UNIT) -> int:
    """Convert a human amount (e.g. "1.5" ether) to wei exactly."""
    if isinstance(amount, bool):
        raise ConfigurationError(f"invalid amount {amount!r}", field="value")
    if isinstance(amount, float):
        # repr() is the shortest round-tripping decimal string
        amount = repr(amount)
    try:
        number = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ConfigurationError(f"invalid amount {amount!r}", field="value") from e
    if not number.is_finite():
        raise ConfigurationError(f"invalid amount {amount!r}", field="value")
    try:
        per_unit = Web3.to_wei(1, unit)
        with localcontext() as ctx:
            ctx.prec = 999
            exact = number * per_unit
        if exact != exact.to_integral_value():
            raise ValueError(f"finer than 1 wei ({exact} wei)")
        return int(Web3.to_wei(number, unit))
    except ValueError as e:
        raise ConfigurationError(f"invalid amount {amount!r}: {e}", field="value") from e


def account_index(value: Any) -> Optional[int]:
    """The account index `value` denotes, or None when it is an address."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def resolve_account(index: int, accounts: Optional[Accounts]) -> str:
    known = accounts() if callable(accounts) else (accounts or [])
    if index < 0 or index >= len(known):
        raise AccountIndexError(index, len(known))
    return known[index]


def _check_fields(options: Mapping[str, Any], where: str) -> None:
    unknown = set(options) - set(TX_FIELDS)
    if unknown:
        raise ConfigurationError(
            f"unknown transaction field(s) in {where}: {', '.join(sorted(unknown))}",
            fields=sorted(unknown),
        )


def format_options(
    raw: Mapping[str, Any],
    defaults: Optional[Mapping[str, Any]] = None,
    accounts: Optional[Accounts] = None,
    *,
    unit: str = DEFAULT_UNIT,
) -> Dict[str, Any]:
    """
    Build TransactionOptions from operator input.

    - `raw["value"]` is a human amount in `unit` and becomes wei.
    - `raw` is laid over `defaults` field by field; `None` counts as absent.
    - An integer (or all-digit) `from` is an index into `accounts`, which may
      be a sequence or a zero-argument callable fetched only when needed.
      Out-of-range indices raise AccountIndexError.
    """
    defaults = defaults or {}
    _check_fields(raw, "options")
    _check_fields(defaults, "defaults")

    given = {k: v for k, v in raw.items() if v is not None}
    if "value" in given:
        given["value"] = to_base_unit(given["value"], unit)

    options: Dict[str, Any] = {k: v for k, v in defaults.items() if v is not None}
    options.update(given)

    if "from" in options:
        index = account_index(options["from"])
        if index is not None:
            options["from"] = resolve_account(index, accounts)

    to = options.get("to")
    if to is not None and not Web3.is_address(to):
        raise ConfigurationError(f"invalid recipient address {to!r}", field="to")
    return options


__all__ = [
    "TX_FIELDS",
    "to_base_unit",
    "account_index",
    "resolve_account",
    "format_options",
]

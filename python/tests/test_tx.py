from __future__ import annotations

from decimal import Decimal

import pytest

from ethdev.errors import AccountIndexError, ConfigurationError
from ethdev.tx import account_index, format_options, to_base_unit

ACCOUNTS = [
    "0x" + "11" * 20,
    "0x" + "22" * 20,
]


def test_one_and_a_half_ether_is_exact() -> None:
    assert to_base_unit("1.5") == 1500000000000000000


def test_eighteen_fractional_digits() -> None:
    assert to_base_unit("0.000000000000000001") == 1
    assert to_base_unit("123456789.123456789123456789") == 123456789123456789123456789
    # beyond 2**53: floats would have lost the last digits here
    assert to_base_unit("9007199.254740993000000001") == 9007199254740993000000001


def test_other_units_and_types() -> None:
    assert to_base_unit("2", "gwei") == 2_000_000_000
    assert to_base_unit(3) == 3 * 10**18
    assert to_base_unit(Decimal("0.25")) == 250000000000000000
    assert to_base_unit(0.1) == 100000000000000000


@pytest.mark.parametrize("bad", ["abc", "-1", "NaN", True, ""])
def test_invalid_amounts(bad) -> None:
    with pytest.raises(ConfigurationError):
        to_base_unit(bad)


@pytest.mark.parametrize(
    "amount,unit",
    [("1.0000000000000000001", "ether"), ("0.0000000000000000001", "ether"), ("1.5", "wei"), ("0.0000000001", "gwei")],
)
def test_amounts_finer_than_one_wei_are_rejected(amount, unit) -> None:
    with pytest.raises(ConfigurationError) as info:
        to_base_unit(amount, unit)
    assert "finer than 1 wei" in str(info.value)


def test_account_index() -> None:
    assert account_index(0) == 0
    assert account_index("1") == 1
    assert account_index(ACCOUNTS[0]) is None
    assert account_index(True) is None


def test_format_merges_and_converts() -> None:
    options = format_options(
        {"from": "1", "to": ACCOUNTS[0], "value": "1.5", "gas": None},
        {"gas": 90000, "gasPrice": 20},
        ACCOUNTS,
    )
    assert options == {
        "gas": 90000,
        "gasPrice": 20,
        "from": ACCOUNTS[1],
        "to": ACCOUNTS[0],
        "value": 1500000000000000000,
    }


def test_raw_beats_defaults_field_by_field() -> None:
    options = format_options({"gas": 21000}, {"gas": 90000, "nonce": 7})
    assert options == {"gas": 21000, "nonce": 7}


def test_address_from_is_untouched() -> None:
    calls = []

    def accounts():
        calls.append(1)
        return ACCOUNTS

    options = format_options({"from": ACCOUNTS[0]}, None, accounts)
    assert options["from"] == ACCOUNTS[0]
    assert calls == []


def test_index_from_defaults_is_resolved() -> None:
    options = format_options({}, {"from": 0}, lambda: ACCOUNTS)
    assert options["from"] == ACCOUNTS[0]


def test_out_of_range_index_raises() -> None:
    with pytest.raises(AccountIndexError) as info:
        format_options({"from": 5}, None, ACCOUNTS)
    assert info.value.data == {"index": 5, "available": 2}

    with pytest.raises(AccountIndexError):
        format_options({"from": "0"}, None, None)


def test_unknown_fields_and_bad_recipient() -> None:
    with pytest.raises(ConfigurationError):
        format_options({"gasLimit": 1})
    with pytest.raises(ConfigurationError):
        format_options({}, {"colour": "red"})
    with pytest.raises(ConfigurationError):
        format_options({"to": "0x1234"})

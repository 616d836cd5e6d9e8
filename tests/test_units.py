import pytest

from app.units import (
    format_block_timestamp,
    format_gas_price,
    format_gwei,
    format_transaction_fee,
    format_transaction_type,
    format_wei_to_eth,
    hex_to_decimal,
    parse_quantity,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0xb", "11"),
        ("0x0", "0"),
        ("0x", "0"),
        ("", ""),
        ("123", "123"),
        ("0xzz", "0xzz"),
        ("0x1_0", "0x1_0"),
        # 2^64, past any machine word
        ("0x10000000000000000", "18446744073709551616"),
    ],
)
def test_hex_to_decimal(value, expected):
    assert hex_to_decimal(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0xde0b6b3a7640000", "1 ETH"),
        ("0x1bc16d674ec80000", "2 ETH"),
        ("0x6f05b59d3b20000", "0.5 ETH"),
        ("0x0", "0 ETH"),
        ("0x", "0 ETH"),
        ("0x1", "0.000000000000000001 ETH"),
        ("", ""),
        ("123", "123"),
    ],
)
def test_format_wei_to_eth(value, expected):
    assert format_wei_to_eth(value) == expected


def test_format_wei_to_eth_keeps_precision_beyond_float():
    wei = 123456789012345678901234567
    assert format_wei_to_eth(hex(wei)) == "123456789.012345678901234567 ETH"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0x3b9aca00", "1 Gwei (0.000000001 ETH)"),
        ("0x77359400", "2 Gwei (0.000000002 ETH)"),
        ("0x1dcd6500", "0.5 Gwei (0.0000000005 ETH)"),
        ("0x0", "0 Gwei (0 ETH)"),
        ("", ""),
        ("123", "123"),
    ],
)
def test_format_gas_price(value, expected):
    assert format_gas_price(value) == expected


@pytest.mark.parametrize(
    "gas_used, gas_price, expected",
    [
        ("0x5208", "0x3b9aca00", "0.000021 ETH"),
        ("0x5208", "0x77359400", "0.000042 ETH"),
        ("0x0", "0x3b9aca00", "0 ETH"),
        ("0x5208", "0x0", "0 ETH"),
        ("", "0x3b9aca00", ""),
        ("0x5208", "", ""),
        ("0xnope", "0x1", ""),
    ],
)
def test_format_transaction_fee(gas_used, gas_price, expected):
    assert format_transaction_fee(gas_used, gas_price) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0x0", "0 (Legacy)"),
        ("0x1", "1 (Access List)"),
        ("0x2", "2 (EIP-1559)"),
        ("0x02", "2 (EIP-1559)"),
        ("0x3", "3 (EIP-4844)"),
        ("0xa", "10"),
        ("0x7e", "126"),
        ("", "0 (Legacy)"),
        ("0x", "0 (Legacy)"),
        ("garbage", "garbage"),
    ],
)
def test_format_transaction_type(value, expected):
    assert format_transaction_type(value) == expected


def test_format_gwei():
    assert format_gwei("0x3b9aca00") == "1"
    assert format_gwei("0x59682f00") == "1.5"
    assert format_gwei("") == ""
    assert format_gwei(None) == ""


def test_parse_quantity():
    assert parse_quantity("0xff") == 255
    assert parse_quantity("42") == 42
    assert parse_quantity("0x") is None
    assert parse_quantity("-1") is None
    assert parse_quantity(None) is None


def test_format_block_timestamp():
    assert format_block_timestamp("0x65d507c0") == "2024-02-20T20:12:48Z"


@pytest.mark.parametrize("value", ["", "0x", "0xzz", "1708459968", "0xffffffffffffffff"])
def test_format_block_timestamp_rejects_malformed(value):
    with pytest.raises(ValueError):
        format_block_timestamp(value)

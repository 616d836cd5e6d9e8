import re
from datetime import datetime, timezone
from typing import Optional

HEX_BODY_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
DEC_PATTERN = re.compile(r"^[0-9]+$")

WEI_PER_GWEI_DECIMALS = 9
WEI_PER_ETH_DECIMALS = 18

TRANSACTION_TYPE_LABELS = {
    0: "Legacy",
    1: "Access List",
    2: "EIP-1559",
    3: "EIP-4844",
}


def _parse_hex(hex_str: str) -> Optional[int]:
    """Parse a 0x-prefixed quantity. Bare "0x" is zero, malformed input is None."""
    body = hex_str[2:]
    if body == "":
        return 0
    if not HEX_BODY_PATTERN.match(body):
        return None
    return int(body, 16)


def parse_quantity(value: Optional[str]) -> Optional[int]:
    """Accept 0x-prefixed hex or plain decimal. Anything else yields None."""
    if not value:
        return None
    if value.startswith("0x"):
        body = value[2:]
        if not body or not HEX_BODY_PATTERN.match(body):
            return None
        return int(body, 16)
    if DEC_PATTERN.match(value):
        return int(value, 10)
    return None


def _format_scaled_int(value: int, decimals: int) -> str:
    if decimals <= 0:
        return str(value)
    negative = value < 0
    s = str(abs(value))
    if len(s) <= decimals:
        s = "0." + "0" * (decimals - len(s)) + s
    else:
        s = s[: len(s) - decimals] + "." + s[len(s) - decimals :]
    s = s.rstrip("0").rstrip(".") or "0"
    if negative:
        s = "-" + s
    return s


def hex_to_decimal(hex_str: str) -> str:
    if not hex_str or not hex_str.startswith("0x"):
        return hex_str
    value = _parse_hex(hex_str)
    if value is None:
        return hex_str
    return str(value)


def format_wei_to_eth(hex_str: str) -> str:
    """Wei quantity -> "<eth> ETH" with the shortest exact decimal."""
    if not hex_str or not hex_str.startswith("0x"):
        return hex_str
    value = _parse_hex(hex_str)
    if value is None:
        return hex_str
    return f"{_format_scaled_int(value, WEI_PER_ETH_DECIMALS)} ETH"


def format_gas_price(hex_str: str) -> str:
    if not hex_str or not hex_str.startswith("0x"):
        return hex_str
    value = _parse_hex(hex_str)
    if value is None:
        return hex_str
    gwei = _format_scaled_int(value, WEI_PER_GWEI_DECIMALS)
    eth = _format_scaled_int(value, WEI_PER_ETH_DECIMALS)
    return f"{gwei} Gwei ({eth} ETH)"


def format_gwei(hex_str: Optional[str]) -> str:
    """Bare Gwei amount (no unit) for the optional EIP-1559 fee fields."""
    if not hex_str:
        return ""
    if not hex_str.startswith("0x"):
        return hex_str
    value = _parse_hex(hex_str)
    if value is None:
        return hex_str
    return _format_scaled_int(value, WEI_PER_GWEI_DECIMALS)


def format_transaction_fee(gas_used_hex: str, gas_price_hex: str) -> str:
    if not gas_used_hex or not gas_price_hex:
        return ""

    def strip(value: str) -> str:
        return value[2:] if value.startswith("0x") else value

    gas_used_body = strip(gas_used_hex)
    gas_price_body = strip(gas_price_hex)
    if not HEX_BODY_PATTERN.match(gas_used_body) or not HEX_BODY_PATTERN.match(gas_price_body):
        return ""

    fee_wei = int(gas_used_body, 16) * int(gas_price_body, 16)
    return f"{_format_scaled_int(fee_wei, WEI_PER_ETH_DECIMALS)} ETH"


def format_transaction_type(hex_str: str) -> str:
    if not hex_str or hex_str == "0x":
        return "0 (Legacy)"
    value = parse_quantity(hex_str)
    if value is None:
        return hex_str
    label = TRANSACTION_TYPE_LABELS.get(value)
    if label is None:
        return str(value)
    return f"{value} ({label})"


def format_block_timestamp(hex_str: str) -> str:
    """Hex unix seconds -> RFC 3339 UTC, e.g. 2024-02-20T20:12:48Z."""
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        raise ValueError("timestamp is not a hex value.")
    seconds = _parse_hex(hex_str)
    if seconds is None or hex_str == "0x":
        raise ValueError(f"failed to parse timestamp '{hex_str}'.")
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"timestamp out of range '{hex_str}'.") from exc
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")

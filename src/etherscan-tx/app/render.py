from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .models import STATUS_FAILED, STATUS_SUCCESS, TransactionRecord

NOT_AVAILABLE = "n/a"


def format_status(status: str) -> str:
    normalized = status.lower()
    if normalized == STATUS_SUCCESS:
        return "✔ success"
    if normalized == STATUS_FAILED:
        return "✘ failed"
    if normalized == "pending":
        return "Pending"
    return status


def format_gas_fees(record: TransactionRecord) -> str:
    if not (record.base_fee_per_gas or record.max_fee_per_gas or record.max_priority_fee_per_gas):
        return NOT_AVAILABLE
    base = record.base_fee_per_gas or NOT_AVAILABLE
    max_fee = record.max_fee_per_gas or NOT_AVAILABLE
    priority = record.max_priority_fee_per_gas or NOT_AVAILABLE
    return f"Base: {base} Gwei | Max: {max_fee} Gwei | Max Priority: {priority} Gwei"


def format_age(timestamp: str, now: Optional[datetime] = None) -> str:
    try:
        moment = datetime.strptime(timestamp, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)
    except ValueError:
        return ""
    elapsed = int(((now or datetime.now(timezone.utc)) - moment).total_seconds())
    hours, rest = divmod(max(elapsed, 0), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"({hours}h {minutes}m {seconds}s ago)"
    if minutes:
        return f"({minutes}m {seconds}s ago)"
    return f"({seconds}s ago)"


def _block_suffix(confirmations: str) -> str:
    if not confirmations:
        return ""
    if confirmations.isdigit():
        return f" ({confirmations} confirmations)"
    return f" ({confirmations})"


def _gas_usage_suffix(gas_used: str, gas_limit: str) -> str:
    if not gas_used.isdigit() or not gas_limit.isdigit() or int(gas_limit) == 0:
        return ""
    return f" ({int(gas_used) / int(gas_limit) * 100:.2f}%)"


def render_transaction(record: TransactionRecord, now: Optional[datetime] = None) -> str:
    rows: List[Tuple[str, str]] = [
        ("Network", record.network),
        ("Hash", record.hash),
        ("Status", format_status(record.status)),
        ("Type", record.transaction_type),
        ("Timestamp", record.timestamp),
        ("Block Number", record.block_number),
        ("From", record.from_address),
        ("To", record.to_address),
        ("Value", record.value),
        ("Gas Limit", record.gas_limit),
        ("Gas Usage", record.gas_used),
        ("Gas Price", record.gas_price),
        ("Transaction Fee", record.transaction_fee),
        ("Gas Fees", format_gas_fees(record)),
        ("Nonce", record.nonce),
        ("Tx Index", record.transaction_index),
    ]

    lines = ["Transaction Details", ""]
    for label, value in rows:
        text = value or NOT_AVAILABLE
        if value:
            if label == "Block Number":
                text += _block_suffix(record.confirmations)
            elif label == "Timestamp":
                age = format_age(value, now)
                if age:
                    text += f" {age}"
            elif label == "Gas Usage":
                text += _gas_usage_suffix(value, record.gas_limit)
            elif label == "To" and record.to_account_type:
                text += f" ({record.to_account_type})"
        lines.append(f"{label}: {text}")
    return "\n".join(lines)

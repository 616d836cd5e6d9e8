from dataclasses import asdict, dataclass
from typing import Any, Dict

STATUS_PENDING = "Pending"
STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_DROPPED = "dropped"
STATUS_REPLACED = "replaced"

CONFIRMATIONS_ERROR = "error"

ACCOUNT_TYPE_CONTRACT = "contract"


@dataclass(frozen=True)
class TransactionRecord:
    """Display-ready view of one transaction. Empty string means "not available"."""

    hash: str
    block_number: str = ""
    from_address: str = ""
    to_address: str = ""
    to_account_type: str = ""
    value: str = ""
    gas_limit: str = ""
    gas_used: str = ""
    gas_price: str = ""
    base_fee_per_gas: str = ""
    max_fee_per_gas: str = ""
    max_priority_fee_per_gas: str = ""
    transaction_fee: str = ""
    nonce: str = ""
    transaction_index: str = ""
    input_data: str = ""
    transaction_type: str = ""
    status: str = STATUS_PENDING
    confirmations: str = ""
    timestamp: str = ""
    network: str = ""
    chain_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["from"] = data.pop("from_address")
        data["to"] = data.pop("to_address")
        return data

import logging
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from .classifier import Outcome
from .config import ClientSession, Config, network_label, resolve_chain_id
from .context import CallContext
from .errors import NotFoundError, ProviderError, TransportError
from .etherscan_client import EtherscanClient
from .models import (
    ACCOUNT_TYPE_CONTRACT,
    CONFIRMATIONS_ERROR,
    STATUS_FAILED,
    STATUS_PENDING,
    STATUS_SUCCESS,
    TransactionRecord,
)
from .retry import RetryPolicy
from .units import (
    format_block_timestamp,
    format_gas_price,
    format_gwei,
    format_transaction_fee,
    format_transaction_type,
    format_wei_to_eth,
    hex_to_decimal,
    parse_quantity,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures of enrichment calls that only degrade a field. Cancellation and
# configuration errors are not in this set and abort the resolution.
DEGRADABLE_ERRORS = (ProviderError, NotFoundError, TransportError, ValueError)


def calculate_confirmations(latest_block: str, tx_block: str) -> str:
    """latest - tx + 1, clamped at 0. Empty when the tx is not mined yet."""
    if not latest_block or not tx_block:
        return ""

    mined_in = parse_quantity(tx_block)
    if mined_in == 0:
        return ""
    latest = parse_quantity(latest_block)
    if latest is None or mined_in is None:
        return CONFIRMATIONS_ERROR

    diff = latest - mined_in
    if diff < 0:
        return "0"
    return str(diff + 1)


def map_receipt_status(status: Any) -> str:
    if status == "0x1":
        return STATUS_SUCCESS
    if status == "0x0":
        return STATUS_FAILED
    return STATUS_PENDING


def _field(obj: Optional[Dict[str, Any]], key: str) -> str:
    if not obj:
        return ""
    value = obj.get(key)
    return value if isinstance(value, str) else ""


class TransactionService:
    """Resolve a transaction hash into one TransactionRecord via the Etherscan proxy."""

    def __init__(
        self,
        config: Config,
        session: Optional[ClientSession] = None,
        client: Optional[EtherscanClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self.config = config
        self.session = session or ClientSession.from_config(config)
        self.client = client or EtherscanClient(self.session, timeout=config.request_timeout)
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=config.max_retries,
            backoff_seconds=config.backoff_seconds,
        )

    def resolve_transaction(
        self,
        ctx: CallContext,
        tx_hash: str,
        network: Optional[str] = None,
    ) -> TransactionRecord:
        normalized_hash = self._normalize_tx_hash(tx_hash)
        chain_id = self._resolve_chain(network)

        tx = self._fetch_transaction(ctx, normalized_hash, chain_id)

        hex_block = _field(tx, "blockNumber")
        hex_gas_price = _field(tx, "gasPrice")
        to_address = _field(tx, "to")
        mined = bool(parse_quantity(hex_block))

        latest_block = self._degrade(
            "eth_blockNumber", None, lambda: self._fetch_latest_block(ctx, chain_id)
        )
        if not hex_block or parse_quantity(hex_block) == 0:
            confirmations = ""
        elif latest_block is None:
            confirmations = CONFIRMATIONS_ERROR
        else:
            confirmations = calculate_confirmations(latest_block, hex_block)

        status, gas_used_hex = self._degrade(
            "eth_getTransactionReceipt",
            (STATUS_PENDING, ""),
            lambda: self._fetch_receipt(ctx, normalized_hash, chain_id),
        )

        block: Optional[Dict[str, Any]] = None
        if mined:
            block = self._degrade(
                "eth_getBlockByNumber", None, lambda: self._fetch_block(ctx, hex_block, chain_id)
            )
        timestamp = ""
        if block:
            timestamp = self._degrade(
                "block timestamp", "", lambda: format_block_timestamp(_field(block, "timestamp"))
            )

        to_account_type = ""
        if to_address:
            to_account_type = self._degrade(
                "eth_getCode", "", lambda: self._fetch_account_type(ctx, to_address, chain_id)
            )

        return TransactionRecord(
            hash=_field(tx, "hash") or normalized_hash,
            block_number=hex_to_decimal(hex_block),
            from_address=_field(tx, "from"),
            to_address=to_address,
            to_account_type=to_account_type,
            value=format_wei_to_eth(_field(tx, "value")),
            gas_limit=hex_to_decimal(_field(tx, "gas")),
            gas_used=hex_to_decimal(gas_used_hex),
            gas_price=format_gas_price(hex_gas_price),
            base_fee_per_gas=format_gwei(_field(block, "baseFeePerGas")),
            max_fee_per_gas=format_gwei(_field(tx, "maxFeePerGas")),
            max_priority_fee_per_gas=format_gwei(_field(tx, "maxPriorityFeePerGas")),
            transaction_fee=format_transaction_fee(gas_used_hex, hex_gas_price),
            nonce=hex_to_decimal(_field(tx, "nonce")),
            transaction_index=hex_to_decimal(_field(tx, "transactionIndex")),
            input_data=_field(tx, "input"),
            transaction_type=format_transaction_type(_field(tx, "type")),
            status=status,
            confirmations=confirmations,
            timestamp=timestamp,
            network=network_label(chain_id),
            chain_id=chain_id,
        )

    def _fetch_transaction(self, ctx: CallContext, tx_hash: str, chain_id: int) -> Dict[str, Any]:
        outcome = self.retry_policy.run(
            ctx, lambda: self.client.get_transaction(ctx, tx_hash, chain_id=chain_id)
        )
        return outcome.unwrap()

    def _fetch_latest_block(self, ctx: CallContext, chain_id: int) -> str:
        return self.client.get_block_number(ctx, chain_id=chain_id).unwrap()

    def _fetch_receipt(self, ctx: CallContext, tx_hash: str, chain_id: int) -> Tuple[str, str]:
        outcome = self.client.get_transaction_receipt(ctx, tx_hash, chain_id=chain_id)
        if outcome.outcome is Outcome.EMPTY_RESULT:
            return STATUS_PENDING, ""
        receipt = outcome.unwrap()
        return map_receipt_status(receipt.get("status")), _field(receipt, "gasUsed")

    def _fetch_block(self, ctx: CallContext, hex_block: str, chain_id: int) -> Dict[str, Any]:
        return self.client.get_block_by_number(ctx, hex_block, chain_id=chain_id).unwrap()

    def _fetch_account_type(self, ctx: CallContext, address: str, chain_id: int) -> str:
        code = self.client.get_code(ctx, address, chain_id=chain_id).unwrap()
        if code and code != "0x":
            return ACCOUNT_TYPE_CONTRACT
        return ""

    def _degrade(self, label: str, default: T, call: Callable[[], T]) -> T:
        try:
            return call()
        except DEGRADABLE_ERRORS as exc:
            logger.warning("%s failed, continuing without it: %s", label, exc)
            return default

    def _resolve_chain(self, network: Optional[str]) -> int:
        if network:
            return resolve_chain_id(network)
        return self.session.chain_id

    def _normalize_tx_hash(self, tx_hash: str) -> str:
        if not isinstance(tx_hash, str):
            raise ValueError("tx_hash must be a string.")
        candidate = tx_hash.strip()
        if not candidate:
            raise ValueError("tx_hash must not be empty.")
        return candidate

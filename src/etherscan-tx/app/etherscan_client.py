import logging
from typing import Any, Dict, Optional

import requests

from .classifier import ClassifiedResponse, classify_response
from .config import DEFAULT_REQUEST_TIMEOUT, ClientSession
from .context import CallContext
from .errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)


class EtherscanClient:
    """Thin wrapper around the Etherscan V2 proxy module. One GET per call, no retries."""

    def __init__(
        self,
        session: ClientSession,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.session = session
        self.timeout = timeout
        self.http = http or requests.Session()

    def get_transaction(
        self, ctx: CallContext, tx_hash: str, chain_id: Optional[int] = None
    ) -> ClassifiedResponse:
        return self.proxy_call(ctx, "eth_getTransactionByHash", {"txhash": tx_hash}, chain_id=chain_id)

    def get_transaction_receipt(
        self, ctx: CallContext, tx_hash: str, chain_id: Optional[int] = None
    ) -> ClassifiedResponse:
        return self.proxy_call(ctx, "eth_getTransactionReceipt", {"txhash": tx_hash}, chain_id=chain_id)

    def get_block_by_number(
        self,
        ctx: CallContext,
        tag: str,
        full_transactions: bool = False,
        chain_id: Optional[int] = None,
    ) -> ClassifiedResponse:
        params = {
            "tag": tag,
            "boolean": str(full_transactions).lower(),
        }
        return self.proxy_call(ctx, "eth_getBlockByNumber", params, chain_id=chain_id)

    def get_block_number(self, ctx: CallContext, chain_id: Optional[int] = None) -> ClassifiedResponse:
        return self.proxy_call(ctx, "eth_blockNumber", {}, expected=str, chain_id=chain_id)

    def get_code(
        self, ctx: CallContext, address: str, tag: str = "latest", chain_id: Optional[int] = None
    ) -> ClassifiedResponse:
        params = {"address": address, "tag": tag}
        return self.proxy_call(ctx, "eth_getCode", params, expected=str, chain_id=chain_id)

    def proxy_call(
        self,
        ctx: CallContext,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        expected: type = dict,
        chain_id: Optional[int] = None,
    ) -> ClassifiedResponse:
        """
        Issue one proxy request and classify the envelope.

        Raises ConfigurationError before any network access when no API key is
        set, CallCancelledError when `ctx` is done, and TransportError for
        anything that prevents reading a JSON object back.
        """
        if not self.session.api_key:
            raise ConfigurationError("ETHERSCAN_API_KEY environment variable is not set")
        ctx.check()

        merged: Dict[str, Any] = {
            "chainid": chain_id if chain_id is not None else self.session.chain_id,
            "module": "proxy",
            "action": action,
            **(params or {}),
            "apikey": self.session.api_key,
        }
        payload = self._request(ctx, merged)
        outcome = classify_response(payload, expected=expected)
        logger.debug("%s on chain %s -> %s", action, merged["chainid"], outcome.outcome.value)
        return outcome

    def _timeout_for(self, ctx: CallContext) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.timeout
        return min(self.timeout, remaining)

    def _request(self, ctx: CallContext, params: Dict[str, Any]) -> Any:
        timeout = self._timeout_for(ctx)
        if timeout <= 0:
            ctx.check()
        try:
            response = self.http.get(
                self.session.base_url,
                params=params,
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            # A timeout cut short by the caller's deadline is a cancellation.
            ctx.check()
            raise TransportError(f"{params.get('action')} request failed: {exc}") from exc

        ctx.check()
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError("failed to decode response from Etherscan.") from exc

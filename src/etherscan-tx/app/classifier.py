"""
Classification of Etherscan proxy envelopes.

The proxy reuses the `result` field for everything: the JSON-RPC payload, a
provider error string (rate limiting, "Error! ..." lookups, bad API key) or
null. Every envelope is sorted into exactly one Outcome, tried in this order:
error object, null, string, structured value.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import NotFoundError, ProviderError, RateLimitError, TransportError

# Etherscan has no error code for throttling; these substrings are all we get.
RATE_LIMIT_MARKERS: Tuple[str, ...] = ("rate limit", "Max calls per sec")
WRONG_NETWORK_MARKER = "Error!"
WRONG_NETWORK_HINT = "(Is the hash on the correct network?)"
EMPTY_RESULT_MESSAGE = "transaction not found or invalid response"

QUANTITY_PATTERN = re.compile(r"^0x[0-9a-fA-F]*$")


class Outcome(Enum):
    EXPLICIT_ERROR = "explicit_error"
    EMPTY_RESULT = "empty_result"
    STRING_RESULT = "string_result"
    STRUCTURED_RESULT = "structured_result"


@dataclass(frozen=True)
class ClassifiedResponse:
    outcome: Outcome
    result: Any = None
    message: str = ""
    retryable: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.STRUCTURED_RESULT

    def unwrap(self) -> Any:
        """Return the structured result or raise the matching error."""
        if self.outcome is Outcome.STRUCTURED_RESULT:
            return self.result
        if self.outcome is Outcome.EMPTY_RESULT:
            raise NotFoundError(self.message)
        if self.retryable:
            raise RateLimitError(self.message)
        raise ProviderError(self.message)


def is_rate_limit_message(message: str) -> bool:
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def provider_message(raw: str) -> str:
    if WRONG_NETWORK_MARKER in raw:
        return f"Etherscan API error: {raw} {WRONG_NETWORK_HINT}"
    return f"Etherscan API error: {raw}"


def _explicit_error_message(payload: Dict[str, Any]) -> Optional[str]:
    error_obj = payload.get("error")
    if not isinstance(error_obj, dict):
        return None
    message = error_obj.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def classify_response(payload: Any, expected: type = dict) -> ClassifiedResponse:
    """
    Sort one decoded envelope into an Outcome.

    `expected` is the structured type of the call: dict for object results
    (transactions, receipts, blocks) and str for quantity results
    (eth_blockNumber, eth_getCode). For str calls, only 0x-prefixed hex counts
    as structured; any other string is a provider message.
    """
    if not isinstance(payload, dict):
        raise TransportError("Unexpected response from Etherscan (non-object envelope).")

    message = _explicit_error_message(payload)
    if message is not None:
        return ClassifiedResponse(Outcome.EXPLICIT_ERROR, message=message)

    result = payload.get("result")
    if result is None:
        return ClassifiedResponse(Outcome.EMPTY_RESULT, message=EMPTY_RESULT_MESSAGE)

    if isinstance(result, str):
        if expected is str and QUANTITY_PATTERN.match(result):
            return ClassifiedResponse(Outcome.STRUCTURED_RESULT, result=result)
        return ClassifiedResponse(
            Outcome.STRING_RESULT,
            result=result,
            message=provider_message(result),
            retryable=is_rate_limit_message(result),
        )

    if isinstance(result, expected):
        return ClassifiedResponse(Outcome.STRUCTURED_RESULT, result=result)

    raise TransportError(
        f"unexpected response format for result: expected {expected.__name__}, got {type(result).__name__}."
    )

class EtherscanError(Exception):
    """Base class for failures while talking to the Etherscan proxy."""


class ConfigurationError(EtherscanError):
    """Client is not usable as configured (e.g. missing API key)."""


class TransportError(EtherscanError):
    """Network failure, timeout, non-2xx status or an undecodable envelope."""


class ProviderError(EtherscanError):
    """Provider answered, but with an error object or an error string."""


class RateLimitError(ProviderError):
    """Provider signalled throttling. Retried before it is surfaced."""


class NotFoundError(EtherscanError):
    def __init__(self, message: str = "transaction not found or invalid response") -> None:
        super().__init__(message)


class CallCancelledError(EtherscanError):
    """The caller's context was cancelled or its deadline passed."""

"""Error taxonomy for the quoting core.

An unsupported request is not an exception: the QuoteEngine answers it
with ``exchangeable: false``.  Everything below either turns into such a
response (``UnquotablePairError``) or surfaces to the caller as an
internal failure.  Nothing in the core retries.
"""

from __future__ import annotations


class RFQError(Exception):
    """Base class for all quoting errors."""


class ConfigurationError(RFQError):
    """Static configuration is missing or invalid (e.g. unknown chain id)."""


class UnquotablePairError(RFQError):
    """The rate table has no entry for the requested direction."""

    def __init__(self, chain_id: int, from_token: str, to_token: str) -> None:
        super().__init__(
            f"no rate for {from_token} -> {to_token} on chain {chain_id}"
        )
        self.chain_id = chain_id
        self.from_token = from_token
        self.to_token = to_token


class OracleError(RFQError):
    """The inventory balance lookup failed (RPC / network)."""

    def __init__(
        self,
        message: str,
        chain_id: int,
        token: str,
        last_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.chain_id = chain_id
        self.token = token
        self.last_error = last_error


class SigningError(RFQError):
    """The maker key is unusable or the signer could not produce a signature."""


class AmountOutOfRangeError(RFQError):
    """A derived amount does not fit the decimal context or a uint256."""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value

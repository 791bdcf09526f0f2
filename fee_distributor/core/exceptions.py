"""
Custom exception classes for the fee distributor.
Provides structured error handling across all modules.
"""

from typing import Any, Optional, Dict


class FeeDistributorException(Exception):
    """Base exception class for the fee distributor."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# Error families

class DistributorValidationError(FeeDistributorException):
    """Raised when call arguments or balances are rejected before any state change."""


class ModeError(FeeDistributorException):
    """Raised when the current mode or caller forbids the operation."""


class RoutingError(FeeDistributorException):
    """Raised when an asset cannot be routed to the reward asset."""


class CollaboratorError(FeeDistributorException):
    """Raised when an external collaborator (ledger, router) fails."""


class ReentrancyError(FeeDistributorException):
    """Raised when a mutating call is entered while another one is in flight."""

    def __init__(self, operation: str):
        super().__init__(
            f"Reentrant call rejected: {operation}",
            "REENTRANCY",
            {"operation": operation}
        )


# Validation errors

class ZeroAddressError(DistributorValidationError):
    """Raised when the null address is supplied."""

    def __init__(self, field: str = "address"):
        super().__init__(f"Zero address supplied for {field}", "ZERO_ADDRESS", {"field": field})


class InvalidAmountError(DistributorValidationError):
    """Raised when an amount is zero or otherwise unusable."""

    def __init__(self, message: str = "Invalid amount", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_AMOUNT", details)


class InvalidPairAddressError(DistributorValidationError):
    """Raised when a pair is not the canonical registry pair of its tokens."""

    def __init__(self, pair: str):
        super().__init__(f"Invalid pair address: {pair}", "INVALID_PAIR_ADDRESS", {"pair": pair})


class EmptyArrayError(DistributorValidationError):
    """Raised when an empty batch is supplied."""

    def __init__(self, field: str):
        super().__init__(f"Empty array supplied for {field}", "EMPTY_ARRAY", {"field": field})


class TooManyPairsError(DistributorValidationError):
    """Raised when a collection batch exceeds the configured maximum."""

    def __init__(self, count: int, maximum: int):
        super().__init__(
            f"Too many pairs: {count} > {maximum}",
            "TOO_MANY_PAIRS",
            {"count": count, "maximum": maximum}
        )


class ArrayLengthMismatchError(DistributorValidationError):
    """Raised when parallel arrays differ in length."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Array length mismatch: {left} != {right}",
            "ARRAY_LENGTH_MISMATCH",
            {"left": left, "right": right}
        )


class InvalidIndexError(DistributorValidationError):
    """Raised when a queue index is out of range."""

    def __init__(self, index: int, length: int):
        super().__init__(
            f"Invalid queue index {index} (length {length})",
            "INVALID_INDEX",
            {"index": index, "length": length}
        )


class DistributionTooFrequentError(DistributorValidationError):
    """Raised when distribute() is called before the cooldown has elapsed."""

    def __init__(self, now: int, next_allowed: int):
        super().__init__(
            f"Distribution too frequent: next allowed at {next_allowed}, now {now}",
            "DISTRIBUTION_TOO_FREQUENT",
            {"now": now, "next_allowed": next_allowed}
        )


# Mode errors

class EmergencyPausedError(ModeError):
    """Raised when an operation is attempted while paused."""

    def __init__(self, operation: str):
        super().__init__(
            f"Operation {operation} rejected: emergency pause active",
            "EMERGENCY_PAUSED",
            {"operation": operation}
        )


class NotInEmergencyModeError(ModeError):
    """Raised when an emergency-only operation runs outside of pause."""

    def __init__(self, operation: str):
        super().__init__(
            f"Operation {operation} requires emergency pause",
            "NOT_IN_EMERGENCY_MODE",
            {"operation": operation}
        )


class NotOwnerError(ModeError):
    """Raised when a non-owner calls an owner-gated operation."""

    def __init__(self, sender: str):
        super().__init__(f"Caller is not the owner: {sender}", "NOT_OWNER", {"sender": sender})


class NotPendingOwnerError(ModeError):
    """Raised when someone other than the pending owner accepts ownership."""

    def __init__(self, sender: str):
        super().__init__(
            f"Caller is not the pending owner: {sender}",
            "NOT_PENDING_OWNER",
            {"sender": sender}
        )


# Routing errors

class NoConversionPathError(RoutingError):
    """Raised when neither a direct nor a bridged route to the reward asset exists."""

    def __init__(self, asset: str, reason: str = "no direct or bridged pool"):
        super().__init__(
            f"No conversion path for {asset}: {reason}",
            "NO_CONVERSION_PATH",
            {"asset": asset, "reason": reason}
        )


class PairNotFoundError(RoutingError):
    """Raised when a pool that should exist cannot be resolved."""

    def __init__(self, token_a: str, token_b: str):
        super().__init__(
            f"Pair not found: {token_a}/{token_b}",
            "PAIR_NOT_FOUND",
            {"token_a": token_a, "token_b": token_b}
        )


# Collaborator errors

class SwapFailedError(CollaboratorError):
    """Raised when the exchange router rejects a swap or redemption."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "SWAP_FAILED", details)


class TransferFailedError(CollaboratorError):
    """Raised when the asset ledger rejects a transfer."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "TRANSFER_FAILED", details)

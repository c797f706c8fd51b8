"""Error taxonomy for wallet, ledger and transaction failures."""

from __future__ import annotations


class FarmError(Exception):
    """Base class for every error raised by the farm controller."""


class WalletUnavailable(FarmError):
    """No wallet provider is configured or reachable."""


class PermissionDenied(FarmError):
    """The wallet refused to expose accounts."""


class UserRejected(PermissionDenied):
    """The user declined a wallet request."""


class NotConnected(FarmError):
    """An action needs an active account and none is connected."""

    def __init__(self, message: str = "Please connect your wallet!"):
        super().__init__(message)


class InvalidAmount(FarmError, ValueError):
    """Amount text is not a non-negative decimal numeral."""

    def __init__(self, text: str):
        super().__init__(f"Invalid amount: {text!r}")
        self.text = text


class LedgerReadFailure(FarmError):
    """A contract read failed or reverted."""

    def __init__(self, call: str, cause: BaseException):
        super().__init__(f"Ledger read '{call}' failed: {cause}")
        self.call = call


class SubmissionFailure(FarmError):
    """A transaction could not be submitted."""

    def __init__(self, action: str, cause: BaseException):
        super().__init__(f"Submitting '{action}' failed: {cause}")
        self.action = action

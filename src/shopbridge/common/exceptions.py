"""Shopbridge exception hierarchy."""


class BridgeError(Exception):
    """Base exception for all Shopbridge errors."""

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str = "", code: str = "BRIDGE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class MissingParameterError(BridgeError):
    """Raised when a required request parameter is absent."""

    status_code = 400

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing {parameter} parameter", code="MISSING_PARAMETER")


class InvalidParameterError(BridgeError):
    """Raised when a parameter is present but malformed."""

    status_code = 400

    def __init__(self, message: str = "Invalid parameter"):
        super().__init__(message, code="INVALID_PARAMETER")


class InvalidOrExpiredStateError(BridgeError):
    """Raised when an OAuth callback carries an unknown, foreign, or expired state."""

    status_code = 400

    def __init__(self, message: str = "Invalid or expired state"):
        super().__init__(message, code="INVALID_OR_EXPIRED_STATE")


class TokenExchangeError(BridgeError):
    """Raised when the platform refuses or fails the code-for-token exchange."""

    status_code = 500
    retryable = True

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="TOKEN_EXCHANGE_FAILED")


class PersistenceError(BridgeError):
    """Raised when a store read or write fails."""

    status_code = 500
    retryable = True

    def __init__(self, message: str = "Database error"):
        super().__init__(message, code="PERSISTENCE_FAILED")


class NotInstalledError(BridgeError):
    """Raised when an operation needs a credential the tenant does not have."""

    status_code = 404

    def __init__(self, message: str = "Shop is not installed"):
        super().__init__(message, code="NOT_INSTALLED")

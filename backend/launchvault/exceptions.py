"""Application exceptions."""


class LaunchVaultError(Exception):
    """Base exception for launchvault errors."""

    pass


class QueryParameterError(LaunchVaultError):
    """A query-string value could not be coerced to the expected type.

    Raised by the query translator's coercers and always handled inside the
    translator; it never reaches an API caller.
    """

    def __init__(self, key: str, value: str, reason: str = "invalid value"):
        super().__init__(f"{key}={value!r}: {reason}")
        self.key = key
        self.value = value


class LaunchNotFoundError(LaunchVaultError):
    """Singular lookup matched no launch."""

    pass


class StoreConnectionError(LaunchVaultError):
    """MongoDB could not be reached."""

    pass

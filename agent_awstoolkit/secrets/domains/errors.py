"""Error taxonomy for secret retrieval.

Every error is terminal for a CLI invocation. By default all of them map to
exit code 1; with distinct exit codes enabled each class carries its own.
"""
from typing import Optional

SINGLE_EXIT_CODE = 1


class SecretFetcherError(Exception):
    """Base class for secret retrieval failures."""

    distinct_exit_code = 1

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def exit_code(self, distinct: bool = False) -> int:
        """Exit status for this error under the chosen exit code mode."""
        return self.distinct_exit_code if distinct else SINGLE_EXIT_CODE


class MissingArgument(SecretFetcherError):
    """Required input (the secret identifier) is absent."""

    distinct_exit_code = 2


class ToolNotInstalled(SecretFetcherError):
    """The tooling needed to talk to Secrets Manager is not available."""

    distinct_exit_code = 3


class NotAuthenticated(SecretFetcherError):
    """The caller identity could not be resolved."""

    distinct_exit_code = 4


class RetrievalFailed(SecretFetcherError):
    """Secrets Manager reported an error; ``detail`` holds its text verbatim."""

    distinct_exit_code = 5


class ConfigError(SecretFetcherError):
    """Configuration error exception."""

    distinct_exit_code = 6

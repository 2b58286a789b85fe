"""Workflow for fetching a secret and presenting its value."""
import sys
import json
import logging
from typing import Any, Optional, TextIO

from ..domains.aws_client import SecretStoreClient, build_client
from ..domains.errors import NotAuthenticated, RetrievalFailed, ToolNotInstalled
from ..domains.models import RetrievalRequest, RetrievalResult, StructuredValue

logger = logging.getLogger(__name__)

SAFETY_REMINDER = "Remember: Never log or expose secrets in production!"


def try_parse_structured(payload: str) -> Optional[StructuredValue]:
    """
    Parse a payload as JSON without raising.

    Any JSON document counts, including bare numbers, strings and null.

    Returns:
        StructuredValue wrapping the parsed document, or None if the payload is not JSON
    """
    try:
        return StructuredValue(json.loads(payload))
    except (ValueError, RecursionError):
        return None


def format_structured(value: Any) -> str:
    """Pretty-print a parsed JSON document with two-space indentation."""
    return json.dumps(value, indent=2, ensure_ascii=False)


class SecretFetcher:
    """Checks prerequisites, retrieves one secret and prints it."""

    def __init__(self, client: SecretStoreClient, stdout: Optional[TextIO] = None):
        self.client = client
        self._stdout = stdout

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def check_prerequisites(self) -> None:
        """
        Verify tooling and identity before any retrieval.

        Raises:
            ToolNotInstalled: If the client's tooling is missing
            NotAuthenticated: If the identity probe fails
        """
        if not self.client.is_available():
            raise ToolNotInstalled(self.client.missing_tool_message)

        if not self.client.probe_identity():
            raise NotAuthenticated("AWS credentials not configured. Please run 'aws configure'")

    def retrieve(self, request: RetrievalRequest) -> RetrievalResult:
        logger.info(f"Fetching secret: {request.secret_id} from region: {request.region}")
        return self.client.get_secret(request)

    def present(self, result: RetrievalResult) -> None:
        """
        Print a retrieval result.

        JSON payloads are pretty-printed under a "JSON formatted" label; anything
        else is printed exactly as received.

        Raises:
            RetrievalFailed: If the result is a failure, carrying the service error text
        """
        if not result.succeeded:
            raise RetrievalFailed("Failed to retrieve secret", detail=result.error_detail)

        logger.info("Secret retrieved successfully")

        structured = try_parse_structured(result.raw_value)
        if structured is not None:
            logger.info("Secret value (JSON formatted):")
            print(format_structured(structured.value), file=self.stdout)
        else:
            logger.info("Secret value:")
            print(result.raw_value, file=self.stdout)

    def run(self, request: RetrievalRequest) -> None:
        self.check_prerequisites()
        self.present(self.retrieve(request))


def fetch_secret(secret_id: str, region: Optional[str] = None,
                 client: Optional[SecretStoreClient] = None) -> str:
    """
    Fetch a secret's raw value for use from Python code.

    Args:
        secret_id: Name or ARN of the secret
        region: AWS region (defaults to us-east-1)
        client: Client to use (a boto3-backed client if not provided)

    Returns:
        The secret payload exactly as stored

    Raises:
        MissingArgument, ToolNotInstalled, NotAuthenticated, RetrievalFailed
    """
    request = RetrievalRequest(secret_id, region)
    fetcher = SecretFetcher(client or build_client())
    fetcher.check_prerequisites()

    result = fetcher.retrieve(request)
    if not result.succeeded:
        raise RetrievalFailed("Failed to retrieve secret", detail=result.error_detail)
    return result.raw_value

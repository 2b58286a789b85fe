"""AWS Secrets Manager client wrappers.

Two backends implement the same ``SecretStoreClient`` interface:

- ``Boto3SecretClient`` talks to Secrets Manager and STS through boto3.
- ``AwsCliSecretClient`` shells out to the ``aws`` executable.

Service errors never raise out of ``get_secret``; they come back as a failed
``RetrievalResult`` carrying the service's own error text.
"""
import base64
import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ConfigError
from .models import RetrievalRequest, RetrievalResult

logger = logging.getLogger(__name__)

BACKENDS = ("sdk", "cli")


class SecretStoreClient(ABC):
    """Capability needed to fetch a secret: availability, identity, retrieval."""

    missing_tool_message = "AWS tooling is not installed. Please install it first."

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the tooling this client relies on is installed."""
        ...

    @abstractmethod
    def probe_identity(self) -> bool:
        """Return True if the caller identity resolves with AWS."""
        ...

    @abstractmethod
    def get_secret(self, request: RetrievalRequest) -> RetrievalResult:
        """Fetch the current value of ``request.secret_id`` in ``request.region``."""
        ...


class Boto3SecretClient(SecretStoreClient):
    """Wrapper around boto3 Secrets Manager and STS clients."""

    missing_tool_message = "Installed boto3 does not support Secrets Manager. Please upgrade boto3."

    def __init__(self, profile: Optional[str] = None):
        self.profile = profile
        self._session = None

    @property
    def session(self) -> boto3.session.Session:
        """Lazy-initialize session."""
        if self._session is None:
            self._session = boto3.session.Session(profile_name=self.profile)
        return self._session

    def is_available(self) -> bool:
        try:
            services = boto3.session.Session().get_available_services()
        except BotoCoreError as e:
            logger.debug(f"Unable to list boto3 services: {e}")
            return False
        return "secretsmanager" in services

    def probe_identity(self) -> bool:
        try:
            self.session.client("sts").get_caller_identity()
            return True
        except (ClientError, BotoCoreError) as e:
            logger.debug(f"Identity probe failed: {e}")
            return False

    def get_secret(self, request: RetrievalRequest) -> RetrievalResult:
        try:
            client = self.session.client("secretsmanager", region_name=request.region)
            response = client.get_secret_value(SecretId=request.secret_id)
        except (ClientError, BotoCoreError) as e:
            return RetrievalResult.failure(str(e))

        secret_string = response.get("SecretString")
        if secret_string is not None:
            return RetrievalResult.success(secret_string)

        return RetrievalResult.success(_decode_binary(response.get("SecretBinary", b"")))


class AwsCliSecretClient(SecretStoreClient):
    """Wrapper around the ``aws`` command-line tool."""

    executable = "aws"
    missing_tool_message = "AWS CLI is not installed. Please install it first."

    def __init__(self, profile: Optional[str] = None):
        self.profile = profile

    def _command(self, *args: str) -> List[str]:
        command = [self.executable, *args]
        if self.profile:
            command.extend(["--profile", self.profile])
        return command

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def probe_identity(self) -> bool:
        result = subprocess.run(
            self._command("sts", "get-caller-identity"),
            capture_output=True,
            text=True,
            check=False
        )
        if result.returncode != 0:
            logger.debug(f"Identity probe failed: {result.stderr.strip()}")
        return result.returncode == 0

    def get_secret(self, request: RetrievalRequest) -> RetrievalResult:
        result = subprocess.run(
            self._command(
                "secretsmanager", "get-secret-value",
                "--secret-id", request.secret_id,
                "--region", request.region,
                "--query", "SecretString",
                "--output", "text",
            ),
            capture_output=True,
            text=True,
            check=False
        )
        # Text output ends with newlines the stored value does not have.
        if result.returncode == 0:
            return RetrievalResult.success(result.stdout.rstrip("\n"))
        return RetrievalResult.failure((result.stdout + result.stderr).rstrip("\n"))


def _decode_binary(data: bytes) -> str:
    """Render a SecretBinary payload as text, falling back to base64."""
    try:
        return data.decode("UTF-8")
    except UnicodeDecodeError:
        return base64.b64encode(data).decode("ascii")


def build_client(backend: str = "sdk", profile: Optional[str] = None) -> SecretStoreClient:
    """
    Create the client for the configured backend.

    Args:
        backend: "sdk" for boto3, "cli" for the aws executable
        profile: Optional named AWS profile

    Raises:
        ConfigError: If the backend name is unknown
    """
    if backend == "sdk":
        return Boto3SecretClient(profile=profile)
    if backend == "cli":
        return AwsCliSecretClient(profile=profile)
    raise ConfigError(f"Unsupported backend: {backend}\nSupported backends: {', '.join(BACKENDS)}")

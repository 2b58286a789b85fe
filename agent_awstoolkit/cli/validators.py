"""Input validation for CLI arguments."""
from typing import Optional

from agent_awstoolkit.secrets.domains.errors import MissingArgument


def usage_text(prog: str) -> str:
    """Usage line plus an example invocation for ``prog``."""
    return (
        f"Usage: {prog} <secret-name> [region]\n"
        f"Example: {prog} dev/api_key us-east-1"
    )


def validate_secret_name(name: Optional[str], prog: str) -> str:
    """
    Validate that a secret name was given.

    Secrets Manager accepts names and full ARNs, so only emptiness is checked.
    The name is passed on unchanged.

    Args:
        name: Secret name or ARN from the command line
        prog: Program name shown in the usage text

    Returns:
        The name as given

    Raises:
        MissingArgument: If the name is missing or empty
    """
    if not name:
        raise MissingArgument("Secret name is required", detail=usage_text(prog))
    return name

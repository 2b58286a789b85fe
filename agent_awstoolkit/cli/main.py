"""CLI entrypoints for agent-awstoolkit.

``fetch-secret <secret-name> [region]`` fetches and prints one secret.
``awstoolkit`` groups the same command with configuration management.
"""
import sys
import argparse
import logging
from pathlib import Path

from agent_awstoolkit import __version__
from agent_awstoolkit.secrets.domains.aws_client import BACKENDS, build_client
from agent_awstoolkit.secrets.domains.config_loader import load_config, default_config_path
from agent_awstoolkit.secrets.domains.errors import (
    ConfigError,
    MissingArgument,
    SecretFetcherError,
    SINGLE_EXIT_CODE,
)
from agent_awstoolkit.secrets.domains.models import RetrievalRequest
from agent_awstoolkit.secrets.domains.preferences import clear_preference, get_preference, set_preference
from agent_awstoolkit.secrets.workflows.secret_operations import SAFETY_REMINDER, SecretFetcher

from .console import configure_logging
from .validators import validate_secret_name

VERSION = __version__
FETCH_PROG = "fetch-secret"

logger = logging.getLogger(__name__)

EXIT_CODES_HELP = """
Exit codes:
  0 - Secret retrieved and printed
  1 - Any failure (default)

With --distinct-exit-codes (or 'exit_codes: distinct' in the config file):
  2 - Secret name missing
  3 - AWS tooling not installed
  4 - AWS credentials not configured
  5 - Secrets Manager returned an error
  6 - Invalid configuration
"""


def _add_fetch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "secret_name",
        nargs="?",
        default="",
        help="Name or ARN of the secret in AWS Secrets Manager"
    )
    parser.add_argument(
        "region",
        nargs="?",
        default=None,
        help="AWS region (default: us-east-1, or aws.region from the config file)"
    )
    parser.add_argument(
        "--profile",
        help="Named AWS profile to use (overrides aws.profile from the config file)"
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        help="'sdk' calls AWS through boto3, 'cli' shells out to the aws executable"
    )
    parser.add_argument(
        "--distinct-exit-codes",
        action="store_true",
        help="Use a different exit code for each failure kind"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress [INFO] lines; the secret value, warnings and errors still print"
    )


def run_fetch(args, prog=FETCH_PROG, client=None) -> int:
    """
    Run the fetch workflow for parsed arguments.

    The safety reminder is logged once at the end, whatever the outcome.

    Returns:
        Process exit code
    """
    configure_logging(quiet=args.quiet)
    distinct = args.distinct_exit_codes

    try:
        try:
            secret_name = validate_secret_name(args.secret_name, prog)

            config = load_config()
            distinct = distinct or config["exit_codes"] == "distinct"
            request = RetrievalRequest(secret_name, args.region or config["aws"]["region"])

            if client is None:
                client = build_client(
                    args.backend or config["backend"],
                    args.profile or config["aws"]["profile"]
                )

            SecretFetcher(client).run(request)
            return 0
        except MissingArgument as e:
            _report(e)
            return e.exit_code(_distinct_exit_codes(distinct))
        except SecretFetcherError as e:
            _report(e)
            return e.exit_code(distinct)
    finally:
        logger.warning(SAFETY_REMINDER)


def _report(e: SecretFetcherError) -> None:
    logger.error(e.message)
    if e.detail:
        print(e.detail, file=sys.stderr)


def _distinct_exit_codes(flag: bool) -> bool:
    """Exit code mode when the config has not been read yet; a broken config means single."""
    if flag:
        return True
    try:
        return load_config()["exit_codes"] == "distinct"
    except ConfigError:
        return False


def fetch_secret_main(argv=None, client=None) -> None:
    """Entrypoint for ``fetch-secret <secret-name> [region]``."""
    parser = argparse.ArgumentParser(
        prog=FETCH_PROG,
        description="Fetch a secret from AWS Secrets Manager and print its value",
        epilog=EXIT_CODES_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    _add_fetch_arguments(parser)
    parser.add_argument("--version", action="version", version=f"agent-awstoolkit {VERSION}")

    args = parser.parse_args(argv)
    sys.exit(_guarded(lambda: run_fetch(args, parser.prog, client)))


def cmd_version(args):
    """Show version information."""
    print(f"agent-awstoolkit {VERSION}")
    return 0


def cmd_config_set_path(args):
    """Set config file path preference."""
    config_path = Path(args.path).resolve()

    if not config_path.exists():
        print(f"Error: Config file does not exist: {config_path}", file=sys.stderr)
        return SINGLE_EXIT_CODE

    if not config_path.is_file():
        print(f"Error: Path is not a file: {config_path}", file=sys.stderr)
        return SINGLE_EXIT_CODE

    set_preference("config_path", str(config_path))
    print(f"Config path set to: {config_path}")
    return 0


def cmd_config_show(args):
    """Show current config file path and where it came from."""
    config_path_pref = get_preference("config_path")

    if config_path_pref:
        config_path = Path(config_path_pref)
        if config_path.exists():
            print(f"Config path: {config_path}")
        else:
            print(f"Config path (from preference, but file not found): {config_path}")
        print("Source: preference")
        return 0

    default_config = default_config_path()
    print(f"Config path: {default_config}")
    if default_config.exists():
        print("Source: default")
    else:
        print("Source: default (file not found, built-in defaults in use)")
    return 0


def cmd_config_clear(args):
    """Clear config path preference."""
    clear_preference("config_path")
    print(f"Config path preference cleared. Will use default: {default_config_path()}")
    return 0


def _guarded(command) -> int:
    try:
        return command()
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return SINGLE_EXIT_CODE
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return SINGLE_EXIT_CODE


def main(argv=None, client=None) -> None:
    """Main CLI entrypoint for ``awstoolkit``."""
    parser = argparse.ArgumentParser(
        prog="awstoolkit",
        description="Agent-AWStoolkit CLI - AWS Secrets Manager retrieval toolkit",
        epilog="""
Configuration:
  Default location: ~/.config/agent-awstoolkit/config.yml (optional)
  Custom path: Set with 'awstoolkit config set-path <path>'
  View current: Run 'awstoolkit config show'

Environment variables:
  AWS_TOOLKIT_REGION - Default region (overrides config file)
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of agent-awstoolkit"
    )

    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Secret retrieval operations",
        description="Read secrets from AWS Secrets Manager"
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")
    get_parser = secrets_subparsers.add_parser(
        "get",
        help="Fetch and print a secret value",
        description="""
Fetch a secret from AWS Secrets Manager.

Checks that AWS tooling is installed and credentials resolve, then fetches the
secret once. JSON values are pretty-printed; other values are printed as-is.
        """ + EXIT_CODES_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    _add_fetch_arguments(get_parser)

    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Manage agent-awstoolkit configuration"
    )
    config_subparsers = config_parser.add_subparsers(dest="config_command")
    config_set_path_parser = config_subparsers.add_parser(
        "set-path",
        help="Set config file path",
        description="""
Set the configuration file path preference.

This stores the absolute path to your config file in:
~/.config/agent-awstoolkit/preferences.json
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    config_set_path_parser.add_argument("path", help="Path to config file")
    config_subparsers.add_parser("show", help="Show current config path")
    config_subparsers.add_parser("clear", help="Clear config path preference")

    args = parser.parse_args(argv)

    if args.command == "version":
        code = cmd_version(args)
    elif args.command == "secrets" and args.secrets_command == "get":
        code = _guarded(lambda: run_fetch(args, "awstoolkit secrets get", client))
    elif args.command == "secrets":
        secrets_parser.print_help()
        code = 2
    elif args.command == "config" and args.config_command == "set-path":
        code = _guarded(lambda: cmd_config_set_path(args))
    elif args.command == "config" and args.config_command == "show":
        code = _guarded(lambda: cmd_config_show(args))
    elif args.command == "config" and args.config_command == "clear":
        code = _guarded(lambda: cmd_config_clear(args))
    elif args.command == "config":
        config_parser.print_help()
        code = 2
    else:
        parser.print_help()
        code = 2

    sys.exit(code)


if __name__ == "__main__":
    main()

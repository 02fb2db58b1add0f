"""Main module entrypoint for pipeline execution.

This module validates configuration, runs one deploy check, and exits with a
status code the pipeline can branch on.
"""

import argparse
import signal
import sys
import threading

from deploy_check.bootstrap import bootstrap_create_deploy_check
from deploy_check.config import CheckMode, ConfigurationError, config_load_settings
from deploy_check.domain import LabelMatchMode
from deploy_check.jobs import EXIT_CODE_CONFIGURATION_ERROR


def main_build_argument_parser() -> argparse.ArgumentParser:
    """Build CLI parser; unset flags fall back to `PLUGIN_*` environment settings.

    Returns:
        argparse.ArgumentParser: Configured parser.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    argument_parser = argparse.ArgumentParser(
        prog="beanstalk-deploy-check",
        description="Wait for an Elastic Beanstalk deployment to become ready and healthy",
    )
    argument_parser.add_argument("--access-key", dest="access_key", type=str, help="aws access key")
    argument_parser.add_argument("--secret-key", dest="secret_key", type=str, help="aws secret key")
    argument_parser.add_argument("--application", dest="application", type=str, help="application name for beanstalk")
    argument_parser.add_argument(
        "--environment",
        dest="environment",
        type=str,
        help="optional environment name for beanstalk; all environments when omitted",
    )
    argument_parser.add_argument("--version-label", dest="version_label", type=str, help="version label for the app")
    argument_parser.add_argument("--region", dest="region", type=str, help="aws region (default us-east-1)")
    argument_parser.add_argument(
        "--timeout",
        dest="timeout",
        type=str,
        help="deploy timeout in minutes (default 30)",
    )
    argument_parser.add_argument("--tick", dest="tick", type=str, help="deploy tick in seconds (default 20)")
    argument_parser.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        default=None,
        help="enable debug log",
    )
    argument_parser.add_argument(
        "--label-match",
        dest="label_match",
        choices=[mode.value for mode in LabelMatchMode],
        help="version label comparison mode (default exact)",
    )
    argument_parser.add_argument(
        "--check-mode",
        dest="check_mode",
        choices=[mode.value for mode in CheckMode],
        help="poll environment status or application version processing (default environment)",
    )
    argument_parser.add_argument(
        "--poll-immediately",
        dest="poll_immediately",
        action="store_true",
        default=None,
        help="poll once on start instead of waiting one tick first",
    )
    return argument_parser


def main_collect_overrides(parsed_arguments: argparse.Namespace) -> dict[str, object]:
    """Return settings overrides for flags explicitly provided on the command line.

    Args:
        parsed_arguments: Parsed CLI namespace.

    Returns:
        dict[str, object]: Non-None flag values keyed by settings field name.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {key: value for key, value in vars(parsed_arguments).items() if value is not None}


def main_install_cancel_handlers(cancel_event: threading.Event) -> None:
    """Set the cancel event when the pipeline interrupts or terminates the step.

    Args:
        cancel_event: Event raced against scheduler timers.

    Returns:
        None: Installs handlers as side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    def _handle_signal(signal_number, frame) -> None:
        _ = (signal_number, frame)
        cancel_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)


def main(argv: list[str] | None = None) -> None:
    """Run one deploy check and exit with its status code.

    Args:
        argv: Optional argument list; defaults to process arguments.

    Returns:
        None: Always terminates through `SystemExit`.

    Raises:
        SystemExit: Raised with 0 on success, 1 on check failure, 2 on configuration error.
    """

    parsed_arguments = main_build_argument_parser().parse_args(argv)

    try:
        settings = config_load_settings(overrides=main_collect_overrides(parsed_arguments))
    except ConfigurationError as error:
        print(f"configuration error: {error}", file=sys.stderr)
        raise SystemExit(EXIT_CODE_CONFIGURATION_ERROR) from error

    cancel_event = threading.Event()
    main_install_cancel_handlers(cancel_event)
    try:
        deploy_check = bootstrap_create_deploy_check(settings=settings, cancel_event=cancel_event)
    except ValueError as error:
        print(f"configuration error: {error}", file=sys.stderr)
        raise SystemExit(EXIT_CODE_CONFIGURATION_ERROR) from error
    execution_result = deploy_check.job_execute()
    raise SystemExit(execution_result.exit_code)


if __name__ == "__main__":
    main()

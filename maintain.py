#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interactive host maintenance.

Runs a fixed sequence of repair, installation and update stages on this
computer:
- System Restore check and restore point
- System image and file integrity repair, disk check scheduling
- Required tools and package upgrades
- Language runtime and its packages
- Shell modules and shell profile lines
- Final verification and an optional restart

Every change is confirmed first unless --auto-confirm is given, and every
operation that needs administrative rights goes through a single elevation
gateway. The whole run is mirrored to a transcript file.
"""

import argparse
import logging
import signal
import sys
from typing import Callable, List, Optional

from common.command_utils import log_message
from common.core_utils import setup_logging
from common.elevation import PrivilegedExecutionGateway
from common.errors import PreconditionError
from common.interrupt import InterruptHandler
from common.privilege import probe_privilege_context
from common.transcript import TranscriptSink
from maintenance import config as static_config
from maintenance.checkers import StateChecker
from maintenance.cli_handler import (
    ConfirmationGate,
    view_configuration,
    wait_for_exit,
)
from maintenance.config_loader import load_app_settings, resolve_log_path
from maintenance.session import SessionState
from maintenance.step_executor import StageContext
from maintenance.workflow import run_workflow

logger = logging.getLogger("maintain")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Host maintenance: integrity repair, tools, updates and shell setup.",
        epilog="Example: python maintain.py --auto-confirm --silent",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--silent",
        action="store_true",
        help="Do not wait for a key press before exiting.",
    )
    parser.add_argument(
        "--auto-confirm",
        action="store_true",
        help="Answer every prompt with its default answer.",
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="View current configuration settings and exit.",
    )

    config_group = parser.add_argument_group("Configuration Overrides")
    config_group.add_argument(
        "--config-file",
        default=None,
        help=f"YAML configuration file (default: {static_config.CONFIG_FILE_NAME} beside this script).",
    )
    config_group.add_argument(
        "--log-file",
        default=None,
        help="Transcript file (default: the configured log file name beside this script).",
    )
    config_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including every executed command.",
    )
    return parser


def main(
    args: Optional[List[str]] = None,
    input_func: Callable[[str], str] = input,
    signal_register: Callable = signal.signal,
) -> int:
    parser = build_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return e.code

    setup_logging()
    app_settings = load_app_settings(
        parsed_args, parsed_args.config_file, current_logger=logger
    )
    formatter = setup_logging(
        log_level=getattr(logging, app_settings.log_level.upper(), logging.INFO),
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )
    symbols = app_settings.symbols

    if parsed_args.view_config:
        view_configuration(app_settings, current_logger=logger)
        return static_config.EXIT_OK

    session = SessionState(
        auto_confirm=parsed_args.auto_confirm, silent_exit=parsed_args.silent
    )
    log_message(
        f"{symbols.get('sparkles', '✨')} Starting host maintenance (Script Version: {static_config.SCRIPT_VERSION})...",
        "info",
        logger,
        app_settings,
    )

    try:
        privilege = probe_privilege_context(app_settings, current_logger=logger)
    except PreconditionError as e:
        log_message(
            f"{symbols.get('critical', '🔥')} {e}", "critical", logger, app_settings
        )
        return static_config.EXIT_PRECONDITION_FAILED

    sink = TranscriptSink(session, app_settings, formatter, current_logger=logger)
    interrupt = InterruptHandler(
        sink, app_settings, current_logger=logger, exit_code=static_config.EXIT_OK
    )
    interrupt.install(signal_register)
    gate = ConfirmationGate(session, app_settings, logger, input_func)

    try:
        log_path = resolve_log_path(app_settings)
        overwrite = False
        if log_path.exists():
            overwrite = gate.confirm(
                f"Log file {log_path} already exists. Overwrite it (otherwise append)?",
                static_config.OVERWRITE_LOG_DEFAULT,
            )
        try:
            sink.open(log_path, overwrite=overwrite)
        except OSError as e:
            log_message(
                f"{symbols.get('warning', '!')} Could not open transcript {log_path}: {e}. Continuing without it.",
                "warning",
                logger,
                app_settings,
            )

        if not gate.confirm(
            "This will repair system files, install tools and apply updates. Continue?",
            static_config.CONTINUE_DEFAULT,
        ):
            log_message(
                f"{symbols.get('info', 'ℹ️')} Maintenance cancelled by user.",
                "info",
                logger,
                app_settings,
            )
            return static_config.EXIT_OK

        context = StageContext(
            app_settings=app_settings,
            session=session,
            gate=gate,
            gateway=PrivilegedExecutionGateway(privilege, app_settings, logger),
            checker=StateChecker(
                app_settings, privilege.preferred_shell_path, current_logger=logger
            ),
            logger=logger,
        )
        run_workflow(context, cancel_check=interrupt.raise_if_cancelled)
        log_message(
            f"{symbols.get('sparkles', '✨')} Host maintenance finished.",
            "info",
            logger,
            app_settings,
        )
    finally:
        sink.close()
        interrupt.uninstall(signal_register)

    wait_for_exit(session, app_settings, input_func)
    return static_config.EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

# maintenance/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles command-line interactions: the confirmation gate, the exit pause
and the configuration view.
"""

import logging
from typing import Callable, Optional

from common.command_utils import get_symbols, log_message
from maintenance import config as static_config
from maintenance.config_models import AppSettings
from maintenance.session import SessionState

module_logger = logging.getLogger(__name__)

InputFunc = Callable[[str], str]


def is_affirmative(response: Optional[str]) -> bool:
    """True when ``response`` is "y" or "yes" in any case."""
    if response is None:
        return False
    return bool(static_config.AFFIRMATIVE_PATTERN.match(response))


class ConfirmationGate:
    """
    Asks the user a question and returns the literal answer.

    The gate does not interpret answers: whatever was typed, including an
    empty line, is returned unchanged and each caller decides what counts as
    "yes" (see ``is_affirmative``). Under auto-confirm the default answer is
    returned without reading input, and the prompt and answer are logged.
    """

    def __init__(
        self,
        session: SessionState,
        app_settings: AppSettings,
        current_logger: Optional[logging.Logger] = None,
        input_func: InputFunc = input,
    ):
        self.session = session
        self.app_settings = app_settings
        self.logger = current_logger or module_logger
        self.input_func = input_func

    def ask(self, prompt: str, default: str = static_config.NO) -> str:
        """
        Args:
            prompt: The question shown to the user.
            default: static_config.YES or static_config.NO.

        Returns:
            The typed response, or ``default`` under auto-confirm or when
            standard input is closed.
        """
        symbols = get_symbols(self.app_settings)
        hint = "[Y/n]" if default == static_config.YES else "[y/N]"
        question = f"{symbols.get('question', '?')} {prompt} {hint}"

        if self.session.auto_confirm:
            log_message(
                f"{question} {default} (auto-confirm)",
                "info",
                self.logger,
                self.app_settings,
            )
            return default

        try:
            response = self.input_func(f"{question}: ")
        except EOFError:
            log_message(
                f"{symbols.get('warning', '!')} No user input (EOF), using default '{default}' for prompt: '{prompt}'",
                "warning",
                self.logger,
                self.app_settings,
            )
            return default

        log_message(
            f"{question} -> '{response}'", "info", self.logger, self.app_settings
        )
        return response

    def confirm(self, prompt: str, default: str = static_config.NO) -> bool:
        """Ask and apply the affirmative match."""
        return is_affirmative(self.ask(prompt, default))


def wait_for_exit(
    session: SessionState,
    app_settings: AppSettings,
    input_func: InputFunc = input,
) -> None:
    """Pause before the console window closes unless running silently."""
    if session.silent_exit or session.auto_confirm:
        return
    try:
        input_func("Press Enter to exit...")
    except EOFError:
        module_logger.debug("No console input available for the exit pause.")


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Displays the effective configuration: catalogs, profile markers,
    integrity parameters and escalation preferences.

    Parameters:
        app_config (AppSettings): The resolved application settings.
        current_logger (Optional[logging.Logger]): Logger to use.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Script Version:                {static_config.SCRIPT_VERSION}\n"
    config_text += f"  Log File:                      {app_config.log_file_path or app_config.log_file_name}\n"
    config_text += f"  Log Level:                     {app_config.log_level}\n"
    config_text += f"  Preferred Shells:              {', '.join(app_config.preferred_shells)}\n"
    config_text += f"  Elevation Helper:              {app_config.helper_tool or '(none)'}\n"
    config_text += f"  Restart Delay (s):             {app_config.restart_delay_seconds}\n\n"

    config_text += "  Required Tools:\n"
    for tool in app_config.tools:
        config_text += f"    {tool.display_name:<28}{tool.identifier}\n"

    config_text += "\n  Language Runtime:\n"
    config_text += f"    Command:                     {app_config.runtime.command}\n"
    config_text += f"    Install Id:                  {app_config.runtime.package_id}\n"
    config_text += f"    Packages:                    {', '.join(p.package_name for p in app_config.runtime.packages)}\n"

    config_text += "\n  Shell Modules:                 "
    config_text += ", ".join(m.module_name for m in app_config.modules) + "\n"

    config_text += "\n  Profile Candidates:\n"
    for candidate in app_config.profile.candidates:
        config_text += f"    {candidate}\n"
    config_text += f"  Import Marker:                 {app_config.profile.import_marker}\n"
    config_text += f"  Initializer Marker:            {app_config.profile.initializer_marker}\n\n"

    config_text += f"  System Drive:                  {app_config.integrity.system_drive}\n"
    config_text += f"  Disk Check Volume:             {app_config.integrity.disk_check_volume}\n"
    config_text += f"  Restore Point Description:     {app_config.integrity.restore_point_description}\n"

    log_message("Displaying current configuration:", "info", logger_to_use, app_config)
    log_message(f"\n{config_text}", "info", logger_to_use, app_config)

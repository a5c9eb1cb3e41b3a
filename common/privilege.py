# common/privilege.py
# -*- coding: utf-8 -*-
"""
Startup probing of the current privilege level and escalation options.

The result is computed once, before any stage runs, and is read-only
afterwards.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from common.command_utils import find_command, get_symbols, log_message
from common.errors import PreconditionError
from maintenance.config_models import AppSettings

module_logger = logging.getLogger(__name__)


class EscalationMechanism(str, Enum):
    """How work is elevated when the current process is not administrative."""

    HELPER_TOOL = "HELPER_TOOL"
    NATIVE_ELEVATION_PROMPT = "NATIVE_ELEVATION_PROMPT"


@dataclass(frozen=True)
class PrivilegeContext:
    """Privilege facts for the running process."""

    current_user_is_admin: bool
    escalation_mechanism: EscalationMechanism
    preferred_shell_path: str
    helper_tool_path: Optional[str] = None

    @property
    def helper_available(self) -> bool:
        return self.escalation_mechanism == EscalationMechanism.HELPER_TOOL


def is_current_user_admin() -> bool:
    """
    Inspect the process token.

    On Windows this asks the shell API whether the user is an administrator;
    elsewhere the effective user id is compared with root.
    """
    if os.name == "nt":
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False

    if hasattr(os, "geteuid"):
        return os.geteuid() == 0

    return False


def find_preferred_shell(
    shells: Iterable[str],
    which: Callable[[str], Optional[str]] = find_command,
) -> Optional[str]:
    """Return the path of the first available command interpreter."""
    for shell in shells:
        path = which(shell)
        if path:
            return path
    return None


def probe_privilege_context(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    which: Callable[[str], Optional[str]] = find_command,
    admin_probe: Callable[[], bool] = is_current_user_admin,
) -> PrivilegeContext:
    """
    Determine the preferred shell, the elevation helper and the admin state.

    Args:
        app_settings: Provides the shell preference order and helper name.
        current_logger: Logger to use.
        which: PATH lookup, injectable for tests.
        admin_probe: Token inspection, injectable for tests.

    Returns:
        The PrivilegeContext for this run.

    Raises:
        PreconditionError: No supported command interpreter was found.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    shell_path = find_preferred_shell(app_settings.preferred_shells, which)
    if not shell_path:
        raise PreconditionError(
            "No supported command interpreter found (looked for: "
            f"{', '.join(app_settings.preferred_shells)})."
        )

    helper_path = which(app_settings.helper_tool) if app_settings.helper_tool else None
    mechanism = (
        EscalationMechanism.HELPER_TOOL
        if helper_path
        else EscalationMechanism.NATIVE_ELEVATION_PROMPT
    )
    is_admin = bool(admin_probe())

    context = PrivilegeContext(
        current_user_is_admin=is_admin,
        escalation_mechanism=mechanism,
        preferred_shell_path=shell_path,
        helper_tool_path=helper_path,
    )
    log_message(
        f"{symbols.get('shield', '🛡️')} Shell: {shell_path} | "
        f"Administrator: {'yes' if is_admin else 'no'} | "
        f"Elevation: {mechanism.value}"
        + (f" ({helper_path})" if helper_path else ""),
        "info",
        logger_to_use,
        app_settings,
    )
    return context

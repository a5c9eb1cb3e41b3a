# maintenance/session.py
# -*- coding: utf-8 -*-
"""
Process-wide session flags.
"""

from dataclasses import dataclass


@dataclass
class SessionState:
    """
    Flags for one maintenance run.

    ``auto_confirm`` and ``silent_exit`` are set once from the command line.
    ``transcript_open`` is only changed by the transcript sink.
    """

    auto_confirm: bool = False
    silent_exit: bool = False
    transcript_open: bool = False

# common/errors.py
# -*- coding: utf-8 -*-
"""
Exception types shared by the maintenance orchestrator.
"""


class MaintenanceError(Exception):
    """Base class for orchestrator errors."""


class PreconditionError(MaintenanceError):
    """Raised when the host cannot run the maintenance workflow at all."""

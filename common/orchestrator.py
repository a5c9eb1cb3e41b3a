# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Centralized orchestrator for running an ordered sequence of tasks.
"""

import logging
from typing import Any, Callable, Dict, List, Optional


class Orchestrator:
    """Runs a series of named tasks strictly in the order they were added."""

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
        cancel_check: Optional[Callable[[], None]] = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            orchestrator_logger: An optional logger instance.
            cancel_check: Called before every task; expected to raise
                (typically SystemExit) when the run has been cancelled.
        """
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.cancel_check = cancel_check
        self.tasks: List[Dict[str, Any]] = []
        # Results keyed by "<task name>_result"
        self.context: Dict[str, Any] = {}

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
    ):
        """
        Adds a task to the execution list.

        Args:
            name: A human-readable name for the task.
            func: The function to execute for this task.
            args: A list of positional arguments to pass to the function.
            kwargs: A dictionary of keyword arguments to pass to the function.
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
        })
        self.logger.debug(f"Task '{name}' added to the queue.")

    def run(self) -> bool:
        """
        Executes all added tasks in sequence.

        A task that raises is logged and the next task still runs.
        KeyboardInterrupt and SystemExit are not caught.

        Returns:
            True if every task completed without raising, False otherwise.
        """
        all_ok = True
        for i, task in enumerate(self.tasks):
            if self.cancel_check is not None:
                self.cancel_check()

            task_name = task["name"]
            self.logger.debug(f"--- Stage {i + 1}: Running task '{task_name}' ---")

            try:
                result = task["func"](*task["args"], **task["kwargs"])
                self.context[f"{task_name}_result"] = result
            except Exception as e:
                all_ok = False
                self.context[f"{task_name}_result"] = e
                self.logger.critical(
                    f"🔥 Task '{task_name}' failed: {e}", exc_info=True
                )
                self.logger.warning(f"Continuing after failed task '{task_name}'.")

        return all_ok

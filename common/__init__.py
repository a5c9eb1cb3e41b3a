"""
Shared plumbing for the maintenance orchestrator: command execution,
privilege probing and elevation, transcript, interrupt handling, logging
and task orchestration.
"""

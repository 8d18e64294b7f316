"""HTTP services for AI Calendar."""

from .server import app, process_command, run_local_server

__all__ = [
    "app",
    "process_command",
    "run_local_server",
]

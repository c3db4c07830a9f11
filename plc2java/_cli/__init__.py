from .compiler_exit import CompilerExit
from .logging_setup import log_step, logger, setup_logging

__all__ = [
    "CompilerExit",
    "log_step",
    "logger",
    "setup_logging",
]

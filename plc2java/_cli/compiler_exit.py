import sys
from pathlib import Path
from typing import NoReturn

from .logging_setup import logger


class CompilerExit:
    @classmethod
    def success(cls, msg: str | None = None) -> NoReturn:
        if msg:
            logger.info(msg)

        sys.exit(0)

    @classmethod
    def user_error(
        cls,
        msg: str,
        path: Path | None = None,
        *,
        show_path: bool = True,
    ) -> NoReturn:
        log_msg = msg
        if show_path:
            if path is None:
                log_msg += "\nFile: unknown"
            else:
                log_msg += f"\nFile: {path.resolve()}"

        logger.error(log_msg)
        logger.error("Exit code: 1")
        sys.exit(1)

    @classmethod
    def _exit_with_log(
        cls,
        code: int,
        msg: str,
        *,
        critical: bool = False,
    ) -> NoReturn:
        if critical:
            logger.critical(msg)
        else:
            logger.error(msg)

        logger.error(f"Exit code: {code}")
        sys.exit(code)

    @classmethod
    def system_error(cls, msg: str, is_critical: bool = False) -> NoReturn:
        cls._exit_with_log(2, msg, critical=is_critical)

    @classmethod
    def internal_error(cls, msg: str, is_critical: bool = False) -> NoReturn:
        cls._exit_with_log(3, msg, critical=is_critical)

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Values under these keys (case-insensitive substring match) never reach a sink
SENSITIVE_KEYWORDS = frozenset(
    {
        'authorization',
        'cookie',
        'password',
        'secret',
        'signature',
        'token',
    }
)
MASK = '********'

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _default_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


def _line_format() -> str:
    columns = (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
    return ' | '.join(columns)


class InterceptHandler(logging.Handler):
    """Forward stdlib records (uvicorn, sqlalchemy, asyncio) into loguru."""

    def __init__(self, target: 'LoguruLogger') -> None:
        super().__init__()
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and message.startswith('Using selector:'):
            return

        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so the line points at the real caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        self.target.opt(depth=depth, exception=record.exc_info).log(level, message)


def _log_file_path() -> str:
    test_dir = os.environ.get('TEST_LOG_DIR')
    stamp = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    if test_dir:
        return f'{test_dir}/test_{stamp}.log'
    return f'{LOG_DIR}/{stamp}.log'


def configure_logger() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = loguru_logger.bind(**_default_extra())
    level = 'DEBUG' if settings.DEBUG else 'INFO'
    line_format = _line_format()

    bound.add(sys.stdout, format=line_format, level=level, enqueue=True)
    # Rotating file only while debugging; deployed instances ship stdout
    if settings.DEBUG:
        bound.add(
            _log_file_path(),
            format=line_format,
            level=level,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler(bound)], level=0, force=True)
    return bound


base_logger = configure_logger()

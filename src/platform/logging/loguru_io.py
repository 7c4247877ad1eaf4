"""
Call-level logging for the ticketing service.

`Logger.io` wraps a function (sync or async) and writes its masked arguments and return value at
DEBUG. A failure is written once, at the innermost decorated frame that sees it: domain errors
(`CustomBaseError`) as a one-line ERROR, anything else with its traceback.

`Logger.base` is the plain bound logger for ad-hoc lines.
"""

from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, base_logger, call_depth_var
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

_LOGGED_FLAG = '_has_logged'


class LoguruIO:
    # Frames between the decorated function and the loguru call: helper method + wrapper
    FRAME_DEPTH = 2

    def __init__(
        self, sink: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self.sink = sink
        self.reraise = reraise
        self.truncate = truncate_content
        self.extra: dict[str, Any] = {}

    def _emit(self) -> 'LoguruLogger':
        return self.sink.bind(**self.extra).opt(depth=self.FRAME_DEPTH)

    def _on_enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._emit().debug(f'args: {self.redact(args)}, kwargs: {self.redact(kwargs)}')

    def _on_return(self, value: Any) -> Any:
        if settings.DEBUG:
            self._emit().debug(f'return: {self.redact(value)}')
        return value

    def _on_error(self, error: Exception) -> None:
        if getattr(error, _LOGGED_FLAG, False):
            return
        setattr(error, _LOGGED_FLAG, True)

        line = f'{type(error).__name__}: {error}'
        if isinstance(error, CustomBaseError):
            self._emit().error(line)
        else:
            self._emit().exception(line)

    def redact(self, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned: Any = {
                key: self.redact(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            cleaned = type(data)(self.redact(item) for item in data)
        else:
            cleaned = mask_sensitive(data)
        return truncate_content(cleaned) if self.truncate else cleaned

    def _borrow_catch_filename(self, wrapper: Callable[..., Any]) -> Callable[..., Any]:
        """Report the wrapper under loguru's own file so tracebacks skip it."""
        loguru_file = cast(types.FunctionType, self.sink.catch).__code__.co_filename
        wrapper.__code__ = wrapper.__code__.replace(co_filename=loguru_file)  # type: ignore[attr-defined]
        return wrapper

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    self._on_enter(args, kwargs)
                    call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return self._on_return(await func(*call_args, **call_kwargs))
                except Exception as e:
                    self._on_error(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            wrapper: Callable[..., Any] = async_wrapper
        else:

            @wraps(func)
            def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    self._on_enter(args, kwargs)
                    call_args, call_kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return self._on_return(func(*call_args, **call_kwargs))
                except Exception as e:
                    self._on_error(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            wrapper = sync_wrapper

        return cast(_F, self._borrow_catch_filename(wrapper))


class Logger:
    base = base_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(base_logger, reraise=reraise, truncate_content=truncate_content)
        return decorator(func) if func else decorator

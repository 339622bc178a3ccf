import functools
import inspect
import logging

from certificates.types import Passphrase

logger = logging.getLogger(__name__)

REDACTED = "********"
SECRET_PARAM_NAMES = ("passphrase", "password", "p12pass")

def _safe_params(func, args, kwargs, max_str_length: int):
    arg_names = inspect.getfullargspec(func).args
    params = dict(zip(arg_names, args))
    params.update(kwargs)

    safe_params = {}
    for k, v in params.items():
        if k == "self":
            continue
        if k in SECRET_PARAM_NAMES or isinstance(v, Passphrase):
            safe_params[k] = REDACTED
        elif isinstance(v, (bytes, bytearray)):
            safe_params[k] = f"<{type(v).__name__} - {len(v)} bytes>"
        elif isinstance(v, (list, tuple)):
            safe_params[k] = f"<{type(v).__name__} - {len(v)} items>"
        elif isinstance(v, str) and len(v) > max_str_length:
            safe_params[k] = v[:max_str_length] + "...(truncated)"
        else:
            safe_params[k] = repr(v)
    return safe_params

def log_function_call(log_args: bool = True, log_return: bool = False, max_str_length: int = 300):
    """Log calls at DEBUG with byte buffers shown as sizes and secrets redacted"""
    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                func_name = func.__qualname__
                if log_args and logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f"📥 Called {func_name} with args: {_safe_params(func, args, kwargs, max_str_length)}")

                result = await func(*args, **kwargs)

                if log_return:
                    logger.debug(f"📤 {func_name} returned: <{type(result).__name__}>")
                return result
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            func_name = func.__qualname__
            if log_args and logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"📥 Called {func_name} with args: {_safe_params(func, args, kwargs, max_str_length)}")

            result = func(*args, **kwargs)

            if log_return:
                logger.debug(f"📤 {func_name} returned: <{type(result).__name__}>")
            return result
        return sync_wrapper
    return decorator

# bookstore/store/decorators.py
"""Decorators that translate ORM errors into domain errors."""
import functools
import logging
from typing import Any, Awaitable, Callable

from tortoise.exceptions import BaseORMException, IntegrityError

from bookstore.core.errors import ConstraintViolation, StoreError

logger = logging.getLogger(__name__)


def store_operation(entity: str, operation: str) -> Callable:
    """
    Wrap ORM failures raised by the decorated coroutine.

    - IntegrityError -> ConstraintViolation (a unique/foreign key race the
      validators could not see)
    - any other Tortoise error, or a value the driver cannot bind
      (OverflowError), -> StoreError
    Domain errors raised inside the coroutine pass through untouched.
    """
    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except StoreError:
                raise
            except IntegrityError as e:
                raise ConstraintViolation(entity, operation, e) from e
            except (BaseORMException, OverflowError) as e:
                raise StoreError(entity, operation, e) from e

        return wrapper

    return decorator


def existence_check(func: Callable[..., Awaitable[bool]]) -> Callable[..., Awaitable[bool]]:
    """
    Turn a failing existence query into False.

    The error is logged, but the caller sees "does not exist"; the UNIQUE
    constraints in the schema still reject the write afterwards.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> bool:
        try:
            return await func(*args, **kwargs)
        except (BaseORMException, OverflowError) as e:
            logger.warning("[%s] existence check failed, reporting False: %s", func.__name__, e, exc_info=True)
            return False

    return wrapper

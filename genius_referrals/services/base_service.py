"""
Base service class.

Provides common functionality for all service classes including session
management, logging and the transaction decorator.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.settings import Settings, settings as default_settings
from genius_referrals.utils.exceptions import ReferralError


# Type variable for generic decorator return types
T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Provides common functionality for all service classes:
    - Session management
    - Logging with bound service context
    - Settings injection
    """

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
            settings: Application settings (defaults to the environment)
        """
        self.session = session
        self.settings = settings or default_settings
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to wrap method in transaction with automatic commit/rollback.

    Commits on success, rolls back on exception. Typed referral errors are
    expected outcomes and are logged as warnings; anything else is logged
    with its traceback.

    Usage:
        @transaction
        async def my_service_method(self, ...):
            # Your code here
            pass

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except ReferralError as e:
            await self.rollback()
            self.logger.warning(
                f"{func.__name__} rejected: {e.message}",
                extra={"function": func.__name__, **e.context},
            )
            raise
        except Exception as e:
            await self.rollback()
            self.logger.error(
                f"Transaction failed in {func.__name__}",
                extra={
                    "error": str(e),
                    "function": func.__name__,
                },
                exc_info=True,
            )
            raise

    return wrapper

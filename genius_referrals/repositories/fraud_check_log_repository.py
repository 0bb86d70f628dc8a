"""
Fraud check log repository.

Data access layer for FraudCheckLog model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.fraud_check_log import FraudCheckLog
from genius_referrals.repositories.base import BaseRepository


class FraudCheckLogRepository(BaseRepository[FraudCheckLog]):
    """Fraud check log repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize fraud check log repository."""
        super().__init__(FraudCheckLog, session)

    async def get_blocked_by_ip(self, ip_address: str) -> list[FraudCheckLog]:
        """Blocked submissions from one IP address."""
        return await self.find_by(ip_address=ip_address, is_blocked=True)

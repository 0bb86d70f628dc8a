"""
Lead repository.

Data access layer for Lead model.
"""

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.enums import LeadStatus
from genius_referrals.models.lead import Lead
from genius_referrals.repositories.base import BaseRepository


class LeadRepository(BaseRepository[Lead]):
    """Lead repository with attribution and velocity queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize lead repository."""
        super().__init__(Lead, session)

    def _attributed(self):
        return select(Lead).where(
            Lead.is_deleted.is_(False),
            Lead.referrer_username.is_not(None),
            Lead.commission_rate_locked_at.is_not(None),
        )

    async def find_first_attributed_by_email(self, email: str) -> Lead | None:
        """
        Earliest attributed lead with this email (first touch wins).

        Args:
            email: Normalized email

        Returns:
            Lead or None
        """
        stmt = (
            self._attributed()
            .where(Lead.email == email)
            .order_by(Lead.created_at.asc(), Lead.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_first_attributed_by_phone(self, phone_key: str) -> Lead | None:
        """
        Earliest attributed lead whose phone ends with the match key.

        Args:
            phone_key: Trailing digits of the normalized phone

        Returns:
            Lead or None
        """
        stmt = (
            self._attributed()
            .where(Lead.phone.endswith(phone_key))
            .order_by(Lead.created_at.asc(), Lead.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_recent_by_contact(
        self, email: str | None, phone: str | None, since: datetime
    ) -> Lead | None:
        """
        Most recent lead with the same email or phone created after `since`.

        Returns:
            Lead or None
        """
        conditions = []
        if email:
            conditions.append(Lead.email == email)
        if phone:
            conditions.append(Lead.phone == phone)
        if not conditions:
            return None

        stmt = (
            select(Lead)
            .where(or_(*conditions), Lead.created_at >= since)
            .order_by(Lead.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_ip_since(self, ip_address: str, since: datetime) -> int:
        """Count leads submitted from an IP address after `since`."""
        stmt = select(func.count(Lead.id)).where(
            Lead.ip_address == ip_address,
            Lead.created_at >= since,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_by_attribution_method(
        self, referrer_username: str
    ) -> dict[str, int]:
        """
        Lead counts per attribution method for a referrer.

        Uses SQL GROUP BY instead of one COUNT per method.

        Returns:
            Dict mapping attribution method to count
        """
        stmt = (
            select(Lead.attribution_method, func.count(Lead.id).label("count"))
            .where(
                Lead.referrer_username == referrer_username,
                Lead.is_deleted.is_(False),
            )
            .group_by(Lead.attribution_method)
        )
        result = await self.session.execute(stmt)
        return {row.attribution_method: row.count for row in result.all()}

    async def count_by_status_for_referrer(
        self, referrer_username: str, since: datetime
    ) -> dict[str, int]:
        """Lead counts per status for a referrer's leads created after `since`."""
        stmt = (
            select(Lead.status, func.count(Lead.id).label("count"))
            .where(
                Lead.referrer_username == referrer_username,
                Lead.created_at >= since,
            )
            .group_by(Lead.status)
        )
        result = await self.session.execute(stmt)
        return {row.status: row.count for row in result.all()}

    async def count_disqualified_by_ip_since(
        self, ip_address: str, since: datetime
    ) -> int:
        """Count disqualified leads submitted from an IP address after `since`."""
        stmt = select(func.count(Lead.id)).where(
            Lead.ip_address == ip_address,
            Lead.status == LeadStatus.DISQUALIFIED.value,
            Lead.created_at >= since,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

"""
Profile repository.

Data access layer for Profile model.
"""

from sqlalchemy import case, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.models.profile import Profile
from genius_referrals.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """Profile repository with tracking code lookups."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize profile repository."""
        super().__init__(Profile, session)

    async def get_by_username(self, username: str) -> Profile | None:
        """Get profile by short-link username."""
        return await self.get_by(username=username)

    async def get_by_tracking_code(
        self, code: str, active_only: bool = True
    ) -> Profile | None:
        """
        Get profile whose assigned code, vanity code or username matches.

        A code match wins over a username match, so a vanity code always
        resolves to its owner.

        Args:
            code: Code from a referral link or cookie
            active_only: Ignore deactivated referrers

        Returns:
            Matching profile or None
        """
        stmt = select(Profile).where(
            or_(
                Profile.tracking_code == code,
                Profile.custom_tracking_code == code,
                Profile.username == code,
            )
        )
        if active_only:
            stmt = stmt.where(Profile.is_active.is_(True))

        stmt = stmt.order_by(
            case((Profile.username == code, 1), else_=0),
            Profile.id.asc(),
        )
        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def is_code_taken(
        self, code: str, exclude_profile_id: int | None = None
    ) -> bool:
        """
        Check whether a code already routes to a profile.

        Referral links resolve by assigned code, vanity code and username,
        so a code is taken if any of the three uses it. The requester's own
        username is excluded via `exclude_profile_id`.
        """
        stmt = select(Profile.id).where(
            or_(
                Profile.tracking_code == code,
                Profile.custom_tracking_code == code,
                Profile.username == code,
            )
        )
        if exclude_profile_id is not None:
            stmt = stmt.where(
                or_(
                    Profile.id != exclude_profile_id,
                    Profile.tracking_code == code,
                    Profile.custom_tracking_code == code,
                )
            )
        stmt = stmt.limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

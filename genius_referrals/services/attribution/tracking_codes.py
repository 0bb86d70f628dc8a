"""
Tracking code service.

Every referrer gets a unique code on signup. Tax preparers get a code built
from their initials ("idw", "idw2", ...), everyone else a numeric
"TGP-123456" code. A vanity code can be chosen and changed until the
referrer finalizes it.
"""

import re
import secrets
import unicodedata
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from genius_referrals.config.business_constants import (
    CUSTOM_CODE_MAX_LENGTH,
    CUSTOM_CODE_MIN_LENGTH,
    RESERVED_TRACKING_CODES,
    TRACKING_CODE_MAX_ATTEMPTS,
    TRACKING_CODE_PREFIX,
)
from genius_referrals.config.settings import Settings
from genius_referrals.models.enums import UserRole
from genius_referrals.models.profile import Profile
from genius_referrals.repositories.profile_repository import ProfileRepository
from genius_referrals.services.authorization import (
    Actor,
    Capability,
    require_capability,
    require_self_or_admin,
)
from genius_referrals.services.base_service import BaseService, transaction
from genius_referrals.utils.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)


_CODE_CHARS = re.compile(r"^[a-zA-Z0-9_-]+$")


@dataclass(frozen=True)
class TrackingCodeInfo:
    """A referrer's active tracking code as shown on their dashboard."""

    code: str
    is_custom: bool
    is_finalized: bool
    tracking_url: str

    @property
    def can_customize(self) -> bool:
        return not self.is_finalized


def _first_letter(name: str | None) -> str:
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFD", name)
    letters = [
        ch for ch in decomposed
        if ch.isascii() and ch.isalpha()
    ]
    return letters[0].lower() if letters else ""


def initials_from_name(
    first_name: str | None, middle_name: str | None, last_name: str | None
) -> str:
    """
    Initials of a full name, accents stripped.

    "Ira D Watkins" -> "idw", "José Núñez" -> "jn". Falls back to "user".
    """
    initials = (
        _first_letter(first_name)
        + _first_letter(middle_name)
        + _first_letter(last_name)
    )
    return initials or "user"


def validate_custom_code(code: str) -> None:
    """
    Check a vanity tracking code against the format rules.

    Raises:
        ValidationError: Code breaks a rule (message says which)
    """
    if not CUSTOM_CODE_MIN_LENGTH <= len(code) <= CUSTOM_CODE_MAX_LENGTH:
        raise ValidationError(
            f"Code must be between {CUSTOM_CODE_MIN_LENGTH} and "
            f"{CUSTOM_CODE_MAX_LENGTH} characters"
        )
    if not _CODE_CHARS.match(code):
        raise ValidationError(
            "Code can only contain letters, numbers, hyphens, and underscores"
        )
    if code[0] in "-_":
        raise ValidationError("Code cannot start with a hyphen or underscore")
    if code[-1] in "-_":
        raise ValidationError("Code cannot end with a hyphen or underscore")
    if code.isdigit():
        raise ValidationError("Code cannot be all numbers")
    if code.lower() in RESERVED_TRACKING_CODES:
        raise ValidationError("This code is reserved and cannot be used")


class TrackingCodeService(BaseService):
    """Assigns, customizes and finalizes referrer tracking codes."""

    def __init__(
        self, session: AsyncSession, settings: Settings | None = None
    ) -> None:
        super().__init__(session, settings)
        self.profile_repo = ProfileRepository(session)

    async def generate_unique_code(
        self,
        role: str,
        first_name: str | None = None,
        middle_name: str | None = None,
        last_name: str | None = None,
    ) -> str:
        """
        Generate a tracking code no profile uses yet.

        Raises:
            ConflictError: No free code after TRACKING_CODE_MAX_ATTEMPTS tries
        """
        if role == UserRole.TAX_PREPARER and first_name and last_name:
            base = initials_from_name(first_name, middle_name, last_name)
            candidates = (
                base if n == 1 else f"{base}{n}"
                for n in range(1, TRACKING_CODE_MAX_ATTEMPTS + 1)
            )
        else:
            candidates = (
                f"{TRACKING_CODE_PREFIX}{100000 + secrets.randbelow(900000)}"
                for _ in range(TRACKING_CODE_MAX_ATTEMPTS)
            )

        for code in candidates:
            if not await self.profile_repo.is_code_taken(code):
                return code

        raise ConflictError(
            f"Failed to generate unique tracking code after "
            f"{TRACKING_CODE_MAX_ATTEMPTS} attempts",
            role=role,
        )

    def _info(self, profile: Profile) -> TrackingCodeInfo:
        code = profile.active_tracking_code
        return TrackingCodeInfo(
            code=code,
            is_custom=profile.custom_tracking_code is not None,
            is_finalized=profile.tracking_code_finalized,
            tracking_url=f"{self.settings.app_url}?ref={code}",
        )

    async def _get_profile(self, profile_id: int) -> Profile:
        profile = await self.profile_repo.get_by_id(profile_id, for_update=True)
        if not profile:
            raise NotFoundError("Profile not found", profile_id=profile_id)
        return profile

    async def _flush_unique(self, code: str, profile_id: int) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(
                "This tracking code is already taken",
                profile_id=profile_id,
                code=code,
            ) from e

    async def get_tracking_code(self, profile_id: int) -> TrackingCodeInfo | None:
        """Active tracking code of a profile, None if it has none yet."""
        profile = await self.profile_repo.get_by_id(profile_id)
        if not profile or not profile.active_tracking_code:
            return None
        return self._info(profile)

    async def get_by_code(self, code: str) -> Profile | None:
        """Profile owning an assigned or vanity code."""
        return await self.profile_repo.get_by_tracking_code(code, active_only=False)

    @transaction
    async def assign_tracking_code(
        self, actor: Actor, profile_id: int
    ) -> TrackingCodeInfo:
        """
        Give a profile its auto-generated code. No-op if it has one.

        Raises:
            NotFoundError: Unknown profile
            AuthorizationError: Not the owner and not an admin
        """
        require_self_or_admin(
            actor,
            profile_id,
            Capability.MANAGE_OWN_TRACKING_CODE,
            Capability.MANAGE_TRACKING_CODES,
        )
        profile = await self._get_profile(profile_id)
        if profile.tracking_code:
            return self._info(profile)

        profile.tracking_code = await self.generate_unique_code(
            profile.role,
            profile.first_name,
            profile.middle_name,
            profile.last_name,
        )
        await self._flush_unique(profile.tracking_code, profile_id)

        self.logger.info(
            "Tracking code assigned",
            extra={"profile_id": profile_id, "code": profile.tracking_code},
        )
        return self._info(profile)

    @transaction
    async def customize_tracking_code(
        self, actor: Actor, profile_id: int, custom_code: str
    ) -> TrackingCodeInfo:
        """
        Set a vanity code. Allowed repeatedly until finalized.

        Raises:
            ValidationError: Code breaks the format rules
            ConflictError: Code finalized already, or taken
            NotFoundError: Unknown profile
            AuthorizationError: Not the owner and not an admin
        """
        require_self_or_admin(
            actor,
            profile_id,
            Capability.MANAGE_OWN_TRACKING_CODE,
            Capability.MANAGE_TRACKING_CODES,
        )
        custom_code = custom_code.strip()
        validate_custom_code(custom_code)

        profile = await self._get_profile(profile_id)
        if profile.tracking_code_finalized:
            raise ConflictError(
                "Tracking code has been finalized and cannot be changed",
                profile_id=profile_id,
            )
        if custom_code in (profile.tracking_code, profile.custom_tracking_code):
            return self._info(profile)
        if await self.profile_repo.is_code_taken(
            custom_code, exclude_profile_id=profile_id
        ):
            raise ConflictError(
                "This tracking code is already taken",
                profile_id=profile_id,
                code=custom_code,
            )

        profile.custom_tracking_code = custom_code
        await self._flush_unique(custom_code, profile_id)

        self.logger.info(
            "Tracking code customized",
            extra={"profile_id": profile_id, "code": custom_code},
        )
        return self._info(profile)

    @transaction
    async def finalize_tracking_code(
        self, actor: Actor, profile_id: int
    ) -> TrackingCodeInfo:
        """
        Permanently lock the active code.

        Raises:
            ConflictError: Already finalized, or no code to finalize
            NotFoundError: Unknown profile
            AuthorizationError: Not the owner and not an admin
        """
        require_self_or_admin(
            actor,
            profile_id,
            Capability.MANAGE_OWN_TRACKING_CODE,
            Capability.MANAGE_TRACKING_CODES,
        )
        profile = await self._get_profile(profile_id)
        if profile.tracking_code_finalized:
            raise ConflictError(
                "Tracking code is already finalized", profile_id=profile_id
            )
        if not profile.active_tracking_code:
            raise ConflictError("No tracking code found", profile_id=profile_id)

        profile.tracking_code_finalized = True
        await self.session.flush()

        self.logger.info(
            "Tracking code finalized",
            extra={"profile_id": profile_id, "code": profile.active_tracking_code},
        )
        return self._info(profile)

    async def backfill_tracking_codes(self, actor: Actor) -> tuple[int, int]:
        """
        Assign codes to every profile that has none.

        Each profile is committed on its own; one failure does not stop
        the rest.

        Returns:
            Tuple of (updated, errors)
        """
        require_capability(actor, Capability.MANAGE_TRACKING_CODES)
        profile_ids = [
            p.id for p in await self.profile_repo.find_by(tracking_code=None)
        ]

        updated = errors = 0
        for profile_id in profile_ids:
            try:
                await self.assign_tracking_code(actor, profile_id)
                updated += 1
            except ConflictError as e:
                self.logger.error(
                    f"Failed to assign tracking code: {e.message}",
                    extra={"profile_id": profile_id},
                )
                errors += 1

        self.logger.info(
            "Tracking code backfill finished",
            extra={"updated": updated, "errors": errors},
        )
        return updated, errors

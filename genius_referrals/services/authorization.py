"""
Role-based authorization.

The whole permission model lives here: a closed role enum, a closed
capability enum and one table joining them. Every service entry point that
changes payouts, tracking codes or documents calls require_capability().
"""

from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from genius_referrals.models.enums import UserRole
from genius_referrals.utils.exceptions import AuthorizationError


class Capability(StrEnum):
    """Actions guarded by authorization."""

    REQUEST_PAYOUT = "request_payout"
    MANAGE_PAYOUTS = "manage_payouts"
    VIEW_EARNINGS = "view_earnings"
    MANAGE_OWN_TRACKING_CODE = "manage_own_tracking_code"
    MANAGE_TRACKING_CODES = "manage_tracking_codes"
    DELETE_OWN_DOCUMENTS = "delete_own_documents"
    DELETE_ANY_DOCUMENTS = "delete_any_documents"


_REFERRER_CAPABILITIES = frozenset({
    Capability.REQUEST_PAYOUT,
    Capability.VIEW_EARNINGS,
    Capability.MANAGE_OWN_TRACKING_CODE,
    Capability.DELETE_OWN_DOCUMENTS,
})

ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.SUPER_ADMIN: frozenset(Capability),
    UserRole.ADMIN: frozenset(Capability),
    UserRole.TAX_PREPARER: _REFERRER_CAPABILITIES,
    UserRole.AFFILIATE: _REFERRER_CAPABILITIES,
    UserRole.CLIENT: _REFERRER_CAPABILITIES,
    UserRole.LEAD: frozenset({Capability.DELETE_OWN_DOCUMENTS}),
}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a service operation."""

    profile_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)


def has_capability(actor: Actor, capability: Capability) -> bool:
    """Check whether the actor's role grants a capability."""
    return capability in ROLE_CAPABILITIES.get(actor.role, frozenset())


def require_capability(actor: Actor, capability: Capability) -> None:
    """
    Raise AuthorizationError unless the actor's role grants the capability.

    Args:
        actor: Caller
        capability: Required capability

    Raises:
        AuthorizationError: Capability not granted
    """
    if not has_capability(actor, capability):
        logger.warning(
            "Authorization denied",
            extra={
                "profile_id": actor.profile_id,
                "role": actor.role.value,
                "capability": capability.value,
            },
        )
        raise AuthorizationError(
            f"Role '{actor.role.value}' may not {capability.value.replace('_', ' ')}",
            profile_id=actor.profile_id,
            capability=capability.value,
        )


def require_self_or_admin(
    actor: Actor, owner_id: int, own: Capability, any_: Capability
) -> None:
    """
    Allow acting on one's own resources with `own`, on anyone's with `any_`.

    Raises:
        AuthorizationError: Neither capability applies
    """
    if actor.profile_id == owner_id and has_capability(actor, own):
        return
    require_capability(actor, any_)

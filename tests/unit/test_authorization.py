"""
Unit tests for role-based authorization.
"""

import pytest

from genius_referrals.models.enums import UserRole
from genius_referrals.services.authorization import (
    ROLE_CAPABILITIES,
    Actor,
    Capability,
    has_capability,
    require_capability,
    require_self_or_admin,
)
from genius_referrals.utils.exceptions import AuthorizationError


class TestRoleCapabilities:
    """Test the role/capability table."""

    def test_every_role_has_an_entry(self):
        assert set(ROLE_CAPABILITIES) == set(UserRole)

    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.SUPER_ADMIN])
    def test_admins_manage_payouts(self, role):
        assert has_capability(Actor(1, role), Capability.MANAGE_PAYOUTS)

    @pytest.mark.parametrize(
        "role", [UserRole.AFFILIATE, UserRole.TAX_PREPARER, UserRole.CLIENT]
    )
    def test_referrers_request_but_do_not_manage(self, role):
        actor = Actor(10, role)
        assert has_capability(actor, Capability.REQUEST_PAYOUT)
        assert not has_capability(actor, Capability.MANAGE_PAYOUTS)

    def test_lead_cannot_request_payout(self):
        assert not has_capability(Actor(20, UserRole.LEAD), Capability.REQUEST_PAYOUT)


class TestRequireCapability:
    def test_granted(self, admin_actor):
        require_capability(admin_actor, Capability.MANAGE_PAYOUTS)

    def test_denied(self, affiliate_actor):
        with pytest.raises(AuthorizationError) as exc_info:
            require_capability(affiliate_actor, Capability.MANAGE_PAYOUTS)
        assert exc_info.value.context["capability"] == "manage_payouts"


class TestRequireSelfOrAdmin:
    """Own-resource vs any-resource checks."""

    def test_owner_allowed(self, affiliate_actor):
        require_self_or_admin(
            affiliate_actor, 10, Capability.REQUEST_PAYOUT, Capability.MANAGE_PAYOUTS
        )

    def test_other_owner_denied(self, affiliate_actor):
        with pytest.raises(AuthorizationError):
            require_self_or_admin(
                affiliate_actor, 11, Capability.REQUEST_PAYOUT, Capability.MANAGE_PAYOUTS
            )

    def test_admin_allowed_for_anyone(self, admin_actor):
        require_self_or_admin(
            admin_actor, 11, Capability.REQUEST_PAYOUT, Capability.MANAGE_PAYOUTS
        )

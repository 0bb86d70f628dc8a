"""
Unit tests for tracking code rules.

Tests cover:
- Initials extraction with accents and missing parts
- Vanity code format rules
- Code generation for tax preparers and other roles
"""

from unittest.mock import AsyncMock

import pytest

from genius_referrals.models.enums import UserRole
from genius_referrals.services.attribution.tracking_codes import (
    TrackingCodeService,
    initials_from_name,
    validate_custom_code,
)
from genius_referrals.utils.exceptions import ConflictError, ValidationError


class TestInitials:
    """Test initials_from_name."""

    def test_three_names(self):
        assert initials_from_name("Ira", "D", "Watkins") == "idw"

    def test_accents_stripped(self):
        assert initials_from_name("José", None, "Núñez") == "jn"

    def test_no_names(self):
        assert initials_from_name(None, None, None) == "user"


class TestValidateCustomCode:
    """Test vanity code format rules."""

    @pytest.mark.parametrize("code", ["ray", "ray-h_2024", "TaxPro1", "a" * 20])
    def test_valid_codes(self, code):
        validate_custom_code(code)

    @pytest.mark.parametrize(
        "code, message",
        [
            ("ab", "between"),
            ("a" * 21, "between"),
            ("ray h", "letters, numbers"),
            ("-ray", "start"),
            ("ray_", "end"),
            ("12345", "all numbers"),
            ("Admin", "reserved"),
        ],
    )
    def test_invalid_codes(self, code, message):
        with pytest.raises(ValidationError) as exc_info:
            validate_custom_code(code)
        assert message in exc_info.value.message


class TestGenerateUniqueCode:
    """Test TrackingCodeService.generate_unique_code."""

    @pytest.fixture
    def service(self, mock_session, test_settings):
        service = TrackingCodeService(mock_session, test_settings)
        service.profile_repo = AsyncMock()
        service.profile_repo.is_code_taken = AsyncMock(return_value=False)
        return service

    @pytest.mark.asyncio
    async def test_tax_preparer_gets_initials(self, service):
        code = await service.generate_unique_code(
            UserRole.TAX_PREPARER, "Ira", "D", "Watkins"
        )
        assert code == "idw"

    @pytest.mark.asyncio
    async def test_taken_initials_get_a_suffix(self, service):
        service.profile_repo.is_code_taken.side_effect = [True, True, False]

        code = await service.generate_unique_code(
            UserRole.TAX_PREPARER, "Ira", "D", "Watkins"
        )

        assert code == "idw3"

    @pytest.mark.asyncio
    async def test_affiliate_gets_numeric_code(self, service):
        code = await service.generate_unique_code(UserRole.AFFILIATE, "Ray", None, "Hamilton")

        assert code.startswith("TGP-")
        assert len(code) == len("TGP-") + 6
        assert code[4:].isdigit()

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, service):
        service.profile_repo.is_code_taken.return_value = True

        with pytest.raises(ConflictError):
            await service.generate_unique_code(UserRole.AFFILIATE)

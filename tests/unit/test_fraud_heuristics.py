"""
Unit tests for fraud heuristics.

Tests cover:
- Sequential and repeated digit phone patterns
- Phone length checks
- Disposable and throwaway-looking emails
- Missing user agents
"""

from genius_referrals.services.fraud.heuristics import (
    FraudFlag,
    check_email,
    check_phone,
    check_user_agent,
    contact_signals,
    has_sequential_run,
)


def _flags(signals):
    return {s.flag for s in signals}


class TestSequentialRun:
    """Test has_sequential_run."""

    def test_ascending_with_wraparound(self):
        assert has_sequential_run("1234567890") is True

    def test_descending_with_wraparound(self):
        assert has_sequential_run("0987654321") is True

    def test_normal_number(self):
        assert has_sequential_run("5551234567") is False

    def test_too_short(self):
        assert has_sequential_run("123456789") is False

    def test_run_inside_longer_number(self):
        assert has_sequential_run("91234567890") is True


class TestCheckPhone:
    """Test phone checks."""

    def test_valid_phone(self):
        assert check_phone("5551234567") == []

    def test_too_short(self):
        assert FraudFlag.INVALID_PHONE_FORMAT in _flags(check_phone("555123"))

    def test_too_long(self):
        assert FraudFlag.INVALID_PHONE_FORMAT in _flags(check_phone("1" * 16))

    def test_missing_phone(self):
        assert FraudFlag.INVALID_PHONE_FORMAT in _flags(check_phone(None))

    def test_repeated_digits(self):
        assert FraudFlag.SUSPICIOUS_PHONE_PATTERN in _flags(check_phone("5550000012"))

    def test_sequential_digits(self):
        assert _flags(check_phone("1234567890")) == {FraudFlag.SUSPICIOUS_PHONE_PATTERN}


class TestCheckEmail:
    """Test email checks."""

    def test_normal_email(self):
        assert check_email("jane.doe@example.com") == []

    def test_disposable_domain(self):
        assert FraudFlag.DISPOSABLE_EMAIL in _flags(check_email("jane@mailinator.com"))

    def test_test_local_part(self):
        assert FraudFlag.SUSPICIOUS_EMAIL_PATTERN in _flags(check_email("test@example.com"))

    def test_long_digit_local_part(self):
        assert FraudFlag.SUSPICIOUS_EMAIL_PATTERN in _flags(check_email("12345678@example.com"))

    def test_very_short_local_part(self):
        assert FraudFlag.SUSPICIOUS_EMAIL_PATTERN in _flags(check_email("ab@example.com"))

    def test_missing_email(self):
        assert check_email(None) == []


class TestCheckUserAgent:
    """Test user agent check."""

    def test_browser_user_agent(self):
        assert check_user_agent("Mozilla/5.0 (Windows NT 10.0; Win64; x64)") == []

    def test_missing_user_agent(self):
        assert _flags(check_user_agent(None)) == {FraudFlag.MISSING_USER_AGENT}

    def test_truncated_user_agent(self):
        assert _flags(check_user_agent("curl/8")) == {FraudFlag.MISSING_USER_AGENT}


class TestContactSignals:
    """Test contact_signals aggregation."""

    def test_clean_submission(self):
        assert contact_signals(
            "jane.doe@example.com", "5551234567", "Mozilla/5.0 (X11; Linux x86_64)"
        ) == []

    def test_weights_add_up(self):
        signals = contact_signals("test@mailinator.com", "1234567890", None)
        # disposable 30 + suspicious email 25 + suspicious phone 25 + user agent 15
        assert sum(s.weight for s in signals) == 95

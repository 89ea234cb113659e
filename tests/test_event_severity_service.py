"""
Tests for EventSeverityService
"""
import pytest

from services.event_severity_service import EventSeverityService, Severity


class TestSeverityTable:

    def test_reference_cases(self):
        assert EventSeverityService.severity_of("FULLSCREEN_EXIT") == "high"
        assert EventSeverityService.severity_of("WINDOW_BLUR") == "medium"
        assert EventSeverityService.severity_of("SESSION_STARTED") == "info"
        assert EventSeverityService.severity_of("SOME_NEW_TYPE") == "low"

    @pytest.mark.parametrize("event_type", [
        "TAB_SWITCH_DETECTED", "TAB_SWITCH", "COPY_PASTE_ATTEMPT", "CLIPBOARD",
        "SHORTCUT", "SUSPICIOUS_BEHAVIOR_DETECTED", "SUSPICIOUS_BEHAVIOR",
    ])
    def test_high(self, event_type):
        assert EventSeverityService.severity_of(event_type) == Severity.HIGH

    @pytest.mark.parametrize("event_type", ["SESSION_PAUSED", "GRACE_PERIOD_ADDED"])
    def test_medium(self, event_type):
        assert EventSeverityService.severity_of(event_type) == Severity.MEDIUM

    @pytest.mark.parametrize("event_type", ["SESSION_RESUMED", "AUTO_SAVED"])
    def test_info(self, event_type):
        assert EventSeverityService.severity_of(event_type) == Severity.INFO

    def test_normalizes_case_and_whitespace(self):
        assert EventSeverityService.severity_of("  fullscreen_exit ") == Severity.HIGH

    def test_empty_type_is_low(self):
        assert EventSeverityService.severity_of("") == Severity.LOW
        assert EventSeverityService.severity_of(None) == Severity.LOW

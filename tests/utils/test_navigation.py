"""
Test cases for parameter search and tab navigation
"""
import pytest

from solar_monitor.utils.navigation import PARAMETER_MAP, TAB_IDS, find_parameter, get_tab


@pytest.mark.parametrize("query", ["Motor Speed", "motor speed", "  MOTOR SPEED  "])
def test_exact_match_is_case_insensitive(query):
    location = find_parameter(query)
    assert location is not None
    assert location.tab == "live-status"
    assert location.element_id == "Motor Speed"


def test_exact_match_beats_earlier_partial_match():
    """'error code' only exists on reports; 'general status' exists on both tabs"""
    location = find_parameter("general status")
    assert location.key == "General Status"
    assert location.tab == "live-status"

    location = find_parameter("error code")
    assert location.tab == "reports"
    assert location.element_id == "Error Code"


def test_reports_specific_keys():
    location = find_parameter("Total Runtime Reports")
    assert location.tab == "reports"
    assert location.element_id == "Total Runtime"

    location = find_parameter("time stamp reports")
    assert location.tab == "reports"
    assert location.element_id == "Time Stamp"


def test_partial_match_uses_first_key_in_map_order():
    location = find_parameter("volt")
    assert location.key == "Voltage Battery"
    assert location.tab == "live-status"

    location = find_parameter("solar")
    assert location.element_id == "Voltage Solar Panel"


def test_partial_match_on_reports_only_keys():
    location = find_parameter("runtime rep")
    assert location.tab == "reports"


@pytest.mark.parametrize("query", ["", "   ", None, "flux capacitor"])
def test_no_match(query):
    assert find_parameter(query) is None


def test_every_mapped_tab_exists():
    for tab, _element_id in PARAMETER_MAP.values():
        assert tab in TAB_IDS


def test_get_tab():
    assert get_tab("ai-intelligence").label == "AI Intelligence"
    assert get_tab("settings") is None

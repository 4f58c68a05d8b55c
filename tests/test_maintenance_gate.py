"""tests for choosing what a page renders"""
from types import SimpleNamespace

from app.core.maintenance_gate import (
    DEFAULT_MAINTENANCE_MESSAGE,
    PageView,
    choose_view,
    maintenance_notice,
)


def state(is_loading=False, is_maintenance_mode=False):
    return SimpleNamespace(is_loading=is_loading, is_maintenance_mode=is_maintenance_mode)


def test_loading_wins():
    assert choose_view(state(is_loading=True)) == PageView.LOADING
    assert choose_view(state(is_loading=True, is_maintenance_mode=True), is_admin=True) == PageView.LOADING


def test_available_page_shows_content():
    assert choose_view(state()) == PageView.CONTENT
    assert choose_view(state(), is_admin=True) == PageView.CONTENT


def test_maintenance_blocks_visitors():
    assert choose_view(state(is_maintenance_mode=True)) == PageView.MAINTENANCE


def test_admin_previews_page_in_maintenance():
    assert choose_view(state(is_maintenance_mode=True), is_admin=True) == PageView.ADMIN_PREVIEW


def test_admin_bypass_can_be_disabled():
    view = choose_view(state(is_maintenance_mode=True), is_admin=True, allow_admin_bypass=False)
    assert view == PageView.MAINTENANCE


def test_maintenance_notice_falls_back_to_default():
    assert maintenance_notice("Back at noon") == "Back at noon"
    assert maintenance_notice(None) == DEFAULT_MAINTENANCE_MESSAGE
    assert maintenance_notice("   ") == DEFAULT_MAINTENANCE_MESSAGE

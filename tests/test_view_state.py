"""Tests for view state mutators."""

import pytest

from plasmid_browser.query.view_state import ViewState, sort_option_label, sort_options


def test_defaults():
    view = ViewState()
    assert (view.search_text, view.member, view.worksheet) == ("", "all", "all")
    assert (view.sort_field, view.sort_direction, view.page) == ("Plasmid_Name", "asc", 1)


def test_set_sort_toggles_on_same_field():
    """Three calls on the same field give asc, desc, asc."""
    view = ViewState(sort_field="Antibiotics", sort_direction="desc")
    directions = []
    for _ in range(3):
        view.set_sort("Box_(Location)")
        directions.append(view.sort_direction)
    assert directions == ["asc", "desc", "asc"]


def test_set_sort_new_field_starts_ascending():
    view = ViewState(sort_direction="desc")
    view.set_sort("Antibiotics")
    assert view.sort_field == "Antibiotics"
    assert view.sort_direction == "asc"


@pytest.mark.parametrize("worksheet,page", [("S1", 4), ("all", 1), ("S9", 12)])
def test_member_change_resets_worksheet_and_page(worksheet, page):
    view = ViewState(member="alice", worksheet=worksheet, page=page)
    view.set_member("bob")
    assert view.member == "bob"
    assert view.worksheet == "all"
    assert view.page == 1


def test_member_reset_happens_even_for_same_member():
    view = ViewState(member="bob", worksheet="S2", page=3)
    view.set_member("bob")
    assert (view.worksheet, view.page) == ("all", 1)


def test_search_and_worksheet_changes_reset_page():
    view = ViewState(page=5)
    view.set_search("kan")
    assert view.page == 1
    view.set_page(4)
    view.set_worksheet("S1")
    assert view.page == 1
    assert view.worksheet == "S1"


def test_sort_change_keeps_page():
    view = ViewState(page=3)
    view.set_sort("Antibiotics")
    assert view.page == 3


def test_set_sort_option():
    view = ViewState()
    view.set_sort_option("Antibiotics:desc")
    assert view.sort_option == "Antibiotics:desc"
    view.set_sort_option("Descriptions")
    assert view.sort_option == "Descriptions:asc"
    with pytest.raises(ValueError):
        view.set_sort_option("Descriptions:sideways")


def test_page_navigation_and_clamp():
    view = ViewState()
    view.set_page(0)
    assert view.page == 1
    view.next_page(2)
    view.next_page(2)
    assert view.page == 2
    view.prev_page()
    view.prev_page()
    assert view.page == 1
    view.last_page(7)
    assert view.page == 7
    assert view.clamp_page(3) == 3
    view.first_page()
    assert view.page == 1


def test_sort_options_cover_every_column():
    options = sort_options()
    assert len(options) == 12
    assert options[:2] == ["Plasmid_Name:asc", "Plasmid_Name:desc"]
    assert sort_option_label("Box_(Location):desc") == "Box (desc)"
    assert sort_option_label("Unknown") == "Unknown (asc)"

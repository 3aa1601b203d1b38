from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from recommender_ui.client import RecommendationError
from recommender_ui.config import GENERIC_ERROR_MESSAGE, QUICK_FILL_TAGS
from recommender_ui.state import Phase, QueryController

from .conftest import StubCollaborator, make_item

APP_PATH = Path(__file__).resolve().parents[1] / "recommender_ui" / "app.py"
LONG_DESCRIPTION = "Measures the ability to analyse numerical data. " * 5


@pytest.fixture
def stub():
    return StubCollaborator(
        records=[
            make_item("SQL Server", description=LONG_DESCRIPTION, duration=None),
            make_item("Microsoft Excel 365", adaptive_support="Yes"),
        ]
    )


@pytest.fixture
def app(stub):
    at = AppTest.from_file(str(APP_PATH), default_timeout=10)
    at.session_state["controller"] = QueryController(stub)
    return at.run()


def _recommend_button(at):
    return next(b for b in at.button if b.label == "Recommend")


def _search(at, text):
    at.text_input(key="query_input").input(text)
    _recommend_button(at).click()
    return at.run()


def test_first_render_shows_prompt(app, stub):
    assert not app.exception
    assert app.title[0].value == "SHL Assessment Recommender"
    assert not app.error
    assert not app.subheader
    assert stub.calls == []


def test_quick_fill_only_fills_the_box(app, stub):
    app.button(key=f"quick-{QUICK_FILL_TAGS[0]}").click().run()
    assert app.text_input(key="query_input").value == QUICK_FILL_TAGS[0]
    assert app.session_state["controller"].state.query == QUICK_FILL_TAGS[0]
    assert stub.calls == []


def test_clear_empties_the_box(app):
    app.button(key=f"quick-{QUICK_FILL_TAGS[0]}").click().run()
    app.button(key="clear").click().run()
    assert app.text_input(key="query_input").value == ""
    assert app.session_state["controller"].state.query == ""


def test_search_renders_cards_in_order(app, stub):
    _search(app, "Data Analyst")
    assert stub.calls == ["Data Analyst"]
    assert [h.value for h in app.subheader] == ["SQL Server", "Microsoft Excel 365"]
    assert len(app.get("link_button")) == 2
    assert not app.error
    assert any("Adaptive: Yes" in m.value for m in app.markdown)


def test_toggle_expands_one_card(app):
    _search(app, "Data Analyst")
    assert not any(LONG_DESCRIPTION.strip() in m.value for m in app.markdown)

    app.button(key="toggle-1-0").click().run()
    assert any(LONG_DESCRIPTION.strip() in m.value for m in app.markdown)
    assert app.button(key="toggle-1-0").label == "Show less"

    app.button(key="toggle-1-0").click().run()
    assert app.button(key="toggle-1-0").label == "Show more"


def test_blank_search_sends_nothing(app, stub):
    _search(app, "   ")
    assert stub.calls == []
    assert app.session_state["controller"].state.phase is Phase.IDLE


def test_failure_shows_inline_error(app, stub):
    stub.error = RecommendationError("HTTP 503", status_code=503)
    _search(app, "Data Analyst")
    assert app.error[0].value == GENERIC_ERROR_MESSAGE
    assert not app.subheader


def test_no_matches_shows_empty_state(app, stub):
    stub.records = []
    _search(app, "Underwater welding")
    assert 'No assessments found for "Underwater welding"' in app.warning[0].value


def test_stale_toggles_are_pruned(app, stub):
    _search(app, "Data Analyst")
    app.button(key="toggle-1-0").click().run()
    _search(app, "Data Analyst")
    toggles = app.session_state["toggles"]
    assert len(toggles) == 0
    assert app.button(key="toggle-2-0").label == "Show more"

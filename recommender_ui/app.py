"""
Streamlit entry point for the SHL Assessment Recommender.

One ``QueryController`` lives in ``st.session_state`` per browser session;
every rerun draws whatever region :func:`recommender_ui.render.build_view`
selects for its state.  Run with::

    streamlit run recommender_ui/app.py
"""

from __future__ import annotations

import streamlit as st
from loguru import logger

from recommender_ui.client import RecommendationClient
from recommender_ui.config import QUERY_PLACEHOLDER, QUICK_FILL_TAGS, configure_logging
from recommender_ui.render import CardToggles, CardView, Region, build_view
from recommender_ui.state import QueryController

QUERY_KEY = "query_input"


@st.cache_resource(show_spinner=False)
def _get_client() -> RecommendationClient:
    """One HTTP client per Streamlit process."""
    configure_logging()
    client = RecommendationClient()
    logger.info("Recommendation client targeting {}", client.base_url)
    return client


def _init_session_state() -> None:
    if "controller" not in st.session_state:
        st.session_state.controller = QueryController(_get_client().recommend)
    if "toggles" not in st.session_state:
        st.session_state.toggles = CardToggles()
    if QUERY_KEY not in st.session_state:
        st.session_state[QUERY_KEY] = ""


def _quick_fill(tag: str) -> None:
    st.session_state.controller.quick_fill(tag)
    st.session_state[QUERY_KEY] = tag


def _clear_query() -> None:
    st.session_state.controller.reset_query()
    st.session_state[QUERY_KEY] = ""


def _render_search_bar(controller: QueryController) -> bool:
    """Draw the query form; returns True when the user asked to submit."""
    with st.form("search", clear_on_submit=False, border=True):
        st.text_input("Role or skills", key=QUERY_KEY, placeholder=QUERY_PLACEHOLDER)
        submitted = st.form_submit_button("Recommend", type="primary")
    controller.set_query(st.session_state[QUERY_KEY])

    cols = st.columns(len(QUICK_FILL_TAGS) + 1)
    for col, tag in zip(cols, QUICK_FILL_TAGS):
        col.button(tag, key=f"quick-{tag}", on_click=_quick_fill, args=(tag,), use_container_width=True)
    cols[-1].button(
        "Clear",
        key="clear",
        on_click=_clear_query,
        disabled=not controller.state.query,
        use_container_width=True,
    )
    return submitted and controller.can_submit


def _render_card(card: CardView, toggles: CardToggles) -> None:
    with st.container(border=True):
        head, badge = st.columns([4, 1])
        head.subheader(card.name)
        if card.duration_badge:
            badge.caption(f"🕒 {card.duration_badge}")

        expanded = toggles.is_expanded(card.key)
        st.write(card.description_text(expanded))
        if card.truncatable:
            st.button(
                "Show less" if expanded else "Show more",
                key=f"toggle-{card.key[0]}-{card.key[1]}",
                on_click=toggles.toggle,
                args=(card.key,),
            )

        if card.badges:
            st.markdown(" ".join(f"`{b}`" for b in card.badges))
        st.link_button(f"{card.cta_label} →", card.url)


def _render_results(controller: QueryController, toggles: CardToggles) -> None:
    toggles.prune(controller.state.result_set)
    view = build_view(controller.state)
    if view.region is Region.LOADING:
        st.info(view.message)
    elif view.region is Region.ERROR:
        st.error(view.message)
    elif view.region is Region.PROMPT:
        st.caption(view.message)
        a, b, c = st.columns(3)
        a.markdown("**Free-text search**  \nDescribe a role, a skill set or a hiring need.")
        b.markdown("**Ranked matches**  \nAssessments come back best match first.")
        c.markdown("**At a glance**  \nDuration, test types and delivery options per card.")
    elif view.region is Region.EMPTY:
        st.warning(view.message)
    else:
        st.caption(view.message)
        cols = st.columns(2)
        for i, card in enumerate(view.cards):
            with cols[i % 2]:
                _render_card(card, toggles)


def main() -> None:
    st.set_page_config(page_title="SHL Assessment Recommender", layout="wide")
    st.title("SHL Assessment Recommender")
    st.caption("Describe the role or skills, and the engine will find matching assessments.")

    _init_session_state()
    controller: QueryController = st.session_state.controller

    if _render_search_bar(controller):
        with st.spinner("Searching..."):
            controller.submit()

    _render_results(controller, st.session_state.toggles)


if __name__ == "__main__":
    main()

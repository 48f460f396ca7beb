"""Streamlit dashboard: explore repositories, bookmark them and chart the results.

Run with ``streamlit run github_explorer/presentation/dashboard.py``.
"""

import logging
import os

import streamlit as st

from github_explorer.application.bookmark_service import BookmarkService
from github_explorer.application.explorer_service import ExplorerService
from github_explorer.application.query_cache import QueryCache
from github_explorer.domain.repository import LANGUAGES, SORT_OPTIONS
from github_explorer.infrastructure.github_client import GitHubRestClient
from github_explorer.infrastructure.key_value_store import create_store
from github_explorer.presentation.cards import card_fields
from github_explorer.presentation.charts import (
    language_doughnut_chart,
    stars_bar_chart,
    summary_metrics,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

CARDS_PER_ROW = 3
SORT_LABELS = dict(SORT_OPTIONS)


@st.cache_resource
def get_github_client() -> GitHubRestClient:
    return GitHubRestClient()


@st.cache_resource
def get_query_cache() -> QueryCache:
    """Query results shared across browser sessions."""
    return QueryCache()


@st.cache_resource
def get_store():
    return create_store()


def get_explorer() -> ExplorerService:
    if "explorer" not in st.session_state:
        st.session_state.explorer = ExplorerService(get_github_client(), get_query_cache())
    return st.session_state.explorer


def get_bookmarks() -> BookmarkService:
    if "bookmarks" not in st.session_state:
        st.session_state.bookmarks = BookmarkService(get_store())
    return st.session_state.bookmarks


def clear_filters(explorer: ExplorerService):
    explorer.clear_filters()
    st.session_state.search_query = ""
    st.session_state.language = "All"


def remove_filter(explorer: ExplorerService, kind: str, value: str):
    explorer.remove_filter(kind, value)
    if kind == "language":
        st.session_state.language = "All"


def render_header(count: int):
    left, right = st.columns([4, 1])
    with left:
        st.title("GitHub Explorer")
        st.caption("Discover trending open source projects")
    with right:
        st.metric("Repositories", count)


def render_filters(explorer: ExplorerService):
    st.text_input(
        "Search",
        key="search_query",
        placeholder="Search repositories...",
        label_visibility="collapsed",
    )
    language_col, sort_col, _ = st.columns([1, 1, 2])
    with language_col:
        st.selectbox("Language", LANGUAGES, key="language")
    with sort_col:
        st.selectbox("Sort by", list(SORT_LABELS), format_func=SORT_LABELS.get, key="sort_by")

    explorer.search_query = st.session_state.search_query
    explorer.language = st.session_state.language
    explorer.sort_by = st.session_state.sort_by

    topics = explorer.visible_topics()
    if topics:
        st.markdown("**Popular Topics**")
        columns = st.columns(min(len(topics), 6))
        for i, topic in enumerate(topics):
            with columns[i % len(columns)]:
                st.button(
                    topic,
                    key=f"topic-{topic}",
                    type="primary" if topic in explorer.selected_topics else "secondary",
                    on_click=explorer.toggle_topic,
                    args=(topic,),
                )

    chips = explorer.active_filters()
    if chips:
        columns = st.columns(min(len(chips), 6))
        for i, (kind, value) in enumerate(chips):
            with columns[i % len(columns)]:
                st.button(
                    f"{value} ×",
                    key=f"remove-{kind}-{value}",
                    help=f"Remove {kind} filter",
                    on_click=remove_filter,
                    args=(explorer, kind, value),
                )


def render_card(repo, bookmarks: BookmarkService):
    fields = card_fields(repo, bookmarks.is_bookmarked(repo.id))

    with st.container(border=True):
        avatar, title, action = st.columns([1, 6, 1])
        with avatar:
            if fields["avatar_url"]:
                st.image(fields["avatar_url"], width=32)
        with title:
            st.markdown(f"{fields['owner']}/ **{fields['name']}**")
        with action:
            st.button(
                "★" if fields["bookmarked"] else "☆",
                key=f"bookmark-{repo.id}",
                help="Remove bookmark" if fields["bookmarked"] else "Bookmark",
                on_click=bookmarks.toggle,
                args=(repo.id,),
            )

        st.caption(fields["description"])

        badges = [f"`{topic}`" for topic in fields["topics"]]
        if fields["more_topics"]:
            badges.append(f"`{fields['more_topics']}`")
        if badges:
            st.markdown(" ".join(badges))

        stats = f"⭐ {fields['stars']} · 🍴 {fields['forks']} · 👁 {fields['watchers']}"
        if fields["language"]:
            stats += f" · `{fields['language']}`"
        st.markdown(stats)

        footer_left, footer_right = st.columns([3, 1])
        with footer_left:
            if fields["updated"]:
                st.caption(f"Updated {fields['updated']}")
        with footer_right:
            st.link_button("Open", fields["url"])


def render_explore(explorer: ExplorerService, bookmarks: BookmarkService, repositories):
    render_filters(explorer)

    if not repositories:
        st.subheader("No repositories found")
        st.write("Try adjusting your search criteria or filters")
        st.button("Clear filters", on_click=clear_filters, args=(explorer,))
        return

    for start in range(0, len(repositories), CARDS_PER_ROW):
        columns = st.columns(CARDS_PER_ROW)
        for column, repo in zip(columns, repositories[start:start + CARDS_PER_ROW]):
            with column:
                render_card(repo, bookmarks)


def render_analytics(repositories):
    if not repositories:
        st.subheader("No data to analyze")
        st.write("Search for repositories to see analytics")
        return

    for column, (label, value) in zip(st.columns(4), summary_metrics(repositories)):
        with column:
            st.metric(label, value)

    stars_col, language_col = st.columns(2)
    with stars_col:
        st.plotly_chart(stars_bar_chart(repositories), use_container_width=True)
    with language_col:
        st.plotly_chart(language_doughnut_chart(repositories), use_container_width=True)


def main():
    st.set_page_config(page_title="GitHub Explorer", layout="wide")

    st.session_state.setdefault("search_query", "")
    st.session_state.setdefault("language", "All")
    st.session_state.setdefault("sort_by", "stars")

    explorer = get_explorer()
    bookmarks = get_bookmarks()

    explorer.search_query = st.session_state.search_query
    explorer.language = st.session_state.language
    explorer.sort_by = st.session_state.sort_by
    explorer.load_topics()

    with st.spinner("Loading repositories..."):
        result = explorer.load_repositories()

    if result.notification:
        st.toast(f"**{result.notification.title}**\n\n{result.notification.description}", icon="⚠️")

    render_header(len(result.repositories))

    explore_tab, analytics_tab = st.tabs(["Explore", "Analytics"])
    with explore_tab:
        render_explore(explorer, bookmarks, result.repositories)
    with analytics_tab:
        render_analytics(result.repositories)


if __name__ == "__main__":
    main()

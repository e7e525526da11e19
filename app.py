import logging
from contextlib import contextmanager
from typing import Optional

import pandas as pd
import streamlit as st

from movieclub import data as dc
from movieclub.data import DATA_DIR
from movieclub.filters import ALL
from movieclub.metrics_breakdowns import compute_breakdowns
from movieclub.metrics_debug import compute_debug
from movieclub.metrics_movies import compute_movies, movie_table
from movieclub.metrics_overview import compute_overview
from movieclub.metrics_seasons import compute_seasons

logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body


def format_filter_summary(season: str, presenter: str, search_text: str) -> str:
    chips = [
        "Season: All" if season == ALL else f"Season: {season}",
        "Presenter: All" if presenter == ALL else f"Presenter: {presenter}",
        f"Search: {search_text}" if search_text else "Search: none",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_chart(spec: Optional[dict], empty_text: str = "No movies match the current filters."):
    if not spec:
        st.info(empty_text)
        return
    st.vega_lite_chart(spec, use_container_width=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Movie Club Dashboard", layout="wide")
inject_base_styles()
st.title("🎬 Movie Club Dashboard")

try:
    data_ctx = dc.load_dashboard_data()
except Exception as exc:
    logger.exception("loading movie data failed")
    st.error(f"Could not read the movie data: {exc}")
    st.stop()

if not data_ctx.get("files"):
    st.error(f"No movie data found. Place movies.json (or movies.csv / movies.xlsx) in {DATA_DIR}.")
    st.stop()

# ----- Sidebar: navigation + filters -----
with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Dashboard", "Data Quality"], index=0)
    st.markdown("---")
    st.markdown("### Filters")
    season = st.selectbox("Season", options=[ALL] + list(data_ctx.get("seasons", [])), format_func=lambda s: "All Seasons" if s == ALL else f"Season {s}")
    presenter = st.selectbox("Presenter", options=[ALL] + list(data_ctx.get("presenters", [])), format_func=lambda p: "All Presenters" if p == ALL else p)
    search_text = st.text_input("Search movies", "")
    with st.expander("Chart settings", expanded=False):
        genre_top_n = st.slider("Genres shown", min_value=3, max_value=15, value=8)
        presenter_top_n = st.slider("Presenters shown", min_value=3, max_value=15, value=8)
        origin_top_n = st.slider("Origins shown", min_value=3, max_value=15, value=8)

filters = {
    "season": season,
    "presenter": presenter,
    "search_text": search_text,
    "limits": {"genres": genre_top_n, "presenters": presenter_top_n, "origins": origin_top_n},
}
ctx = dc.prepare_context(filters, data_ctx)
filt = ctx["filters"]

st.markdown(f"<div class='chip-row'>{format_filter_summary(filt.season, filt.presenter, filt.search_text)}</div>", unsafe_allow_html=True)

if nav_choice == "Dashboard":
    overview = compute_overview(filt, ctx)
    kpis = overview["kpis"]
    st.caption(f"Explore your cinematic journey • {kpis['total_movies']} movies • {kpis['watch_hours']} hours of cinema")

    cols = st.columns(5)
    cols[0].metric("Movies", f"{kpis['total_movies']:,}")
    cols[1].metric("Watch Time", f"{kpis['watch_hours']}h", help="Total minutes / 60, rounded.")
    cols[2].metric("Countries", f"{kpis['unique_origin_count']}")
    cols[3].metric("Presenters", f"{kpis['unique_presenter_count']}")
    cols[4].metric("Avg Rating", f"{kpis['average_rating_display']}%", help="Mean RottenTomatoes rating over rated movies only.")

    seasons_payload = compute_seasons(filt, ctx)
    breakdowns = compute_breakdowns(filt, ctx)

    left, right = st.columns(2)
    with left:
        with card("📈 Season Trends"):
            render_chart(seasons_payload["charts"].get("season_trend"), "No seasons in the collection.")
        with card("🌍 Movies by Origin"):
            render_chart(breakdowns["charts"].get("movies_by_origin"))
    with right:
        with card("🎭 Genre Distribution"):
            render_chart(breakdowns["charts"].get("genre_distribution"))
        with card("🏆 Top Presenters"):
            render_chart(breakdowns["charts"].get("top_presenters"))

    with card("⏱️ Minutes by Season (filtered)"):
        render_chart(seasons_payload["charts"].get("minutes_by_season"))

    movies_payload = compute_movies(filt, ctx)
    with card(f"🎬 Movies ({movies_payload['count']})"):
        table = movie_table(ctx["filtered_movies"])
        if table.empty:
            st.info("No movies match the current filters.")
        else:
            st.dataframe(table, use_container_width=True, hide_index=True)
            st.download_button(
                "Export CSV",
                data=table.to_csv(index=False).encode("utf-8"),
                file_name="movies.csv",
                mime="text/csv",
            )
else:
    debug = compute_debug(filt, ctx)
    st.subheader("Data Quality")
    st.write(f"Source: {', '.join(debug['files'])}")
    st.json(debug["row_counts"])
    st.markdown("**Cleaning checks**")
    st.json(debug["cleaning_checks"])
    st.markdown("**Presenter labels rewritten**")
    if debug["presenter_aliases"]:
        st.dataframe(pd.DataFrame(debug["presenter_aliases"]), hide_index=True)
    else:
        st.success("No presenter labels needed rewriting.")
    st.markdown("**Presenter labels outside the alias table**")
    if debug["unmapped_presenters"]:
        st.dataframe(pd.DataFrame(debug["unmapped_presenters"]), hide_index=True)
    else:
        st.success("Every presenter label is a canonical name.")

"""WeatherNow: Streamlit weather dashboard backed by WeatherAPI.com.

Run with: streamlit run src/app.py

Three pages share a header with a live clock:
- Today: current conditions for shared coordinates or a searched city,
  from the current-conditions endpoint.
- Dashboard: current conditions for shared coordinates or a searched city,
  with a condition-themed background, an advisory and a 5-day strip.
- Forecast: 7-day forecast for shared coordinates (?lat=..&lon=..), with a
  day-over-day prediction, today's highlights and, when CHAT_ENABLED is
  set, AI-powered Q&A.
"""

from __future__ import annotations

import logging
from datetime import datetime

import streamlit as st

from src import config, weatherapi_client
from src.chat import ChatError, ask_weather_question, chat_available
from src.conditions import Category
from src.errors import LOCATION_ERROR_MESSAGE
from src.geocoding import GeocodingError, geocode_location, parse_coordinate
from src.normalizer import display_value, format_temperature
from src.screens import (
    SHARE_LOCATION_HINT,
    SHARE_LOCATION_PROMPT,
    CurrentView,
    CurrentWeatherScreen,
    ForecastScreen,
    ForecastView,
    TodayScreen,
    build_forecast_view,
    clock_labels,
    header_tints,
)
from src.theme import DEFAULT_GRADIENT

logger = logging.getLogger(__name__)

TODAY = "Today"
DASHBOARD = "Dashboard"
FORECAST = "Forecast"


# ---------------------------------------------------------------------------
# CSS injection: glassmorphism cards over a condition gradient
# ---------------------------------------------------------------------------

def _inject_css(gradient: str, category: Category | None) -> None:
    """Inject page CSS with the dynamic gradient and scroll-tinted header."""
    resting, scrolled = header_tints(category)
    st.markdown(f"""
    <style>
    /* ===== PAGE BACKGROUND ===== */
    .stApp {{
        --wx-gradient: {gradient};
        background: {gradient} !important;
    }}

    #MainMenu {{visibility: hidden;}}
    footer {{visibility: hidden;}}
    .block-container {{
        padding-top: 1rem !important;
        padding-bottom: 2rem !important;
        max-width: 900px !important;
    }}

    /* ===== HEADER: transparent until scrolled, then condition tint ===== */
    @keyframes wx-header-tint {{
        from {{ background: {resting}; }}
        to {{ background: {scrolled}; }}
    }}
    .wx-header {{
        position: sticky;
        top: 0;
        z-index: 999;
        display: flex;
        align-items: center;
        justify-content: space-between;
        padding: 8px 14px;
        border-radius: 14px;
        backdrop-filter: blur(12px);
        -webkit-backdrop-filter: blur(12px);
        background: {resting};
        animation: wx-header-tint linear both;
        animation-timeline: scroll();
        animation-range: 0 10px;
    }}
    .wx-title {{
        font-size: 1.15rem;
        font-weight: 700;
        color: #ffffff;
    }}
    .wx-clock {{
        text-align: right;
        color: rgba(255, 255, 255, 0.9);
    }}
    .wx-clock .c-date {{ font-size: 0.8rem; }}
    .wx-clock .c-time {{ font-size: 1.4rem; font-weight: 700; }}

    /* ===== GLASS CARD ===== */
    .glass-card {{
        background: rgba(255, 255, 255, 0.10);
        backdrop-filter: blur(20px);
        -webkit-backdrop-filter: blur(20px);
        border-radius: 16px;
        border: 1px solid rgba(255, 255, 255, 0.12);
        padding: 16px;
        margin-bottom: 14px;
        color: #ffffff;
    }}
    .section-label {{
        font-size: 0.75rem;
        text-transform: uppercase;
        letter-spacing: 0.5px;
        color: rgba(255, 255, 255, 0.6);
        margin-bottom: 10px;
        font-weight: 600;
        padding-bottom: 8px;
        border-bottom: 1px solid rgba(255, 255, 255, 0.1);
    }}

    /* ===== CURRENT CONDITIONS ===== */
    .wx-now {{
        text-align: center;
        padding: 10px 0 16px 0;
        color: #ffffff;
    }}
    .wx-now .n-city {{ font-size: 1.4rem; font-weight: 600; }}
    .wx-now .n-country {{ font-size: 0.8rem; opacity: 0.7; }}
    .wx-now .n-temp {{ font-size: 4.5rem; font-weight: 200; line-height: 1.05; }}
    .wx-now .n-cond {{ font-size: 1.05rem; opacity: 0.85; }}

    /* ===== STAT CARDS ===== */
    .stat-card {{
        background: rgba(255, 255, 255, 0.10);
        border-radius: 14px;
        border: 1px solid rgba(255, 255, 255, 0.12);
        padding: 12px;
        min-height: 110px;
        color: #ffffff;
    }}
    .stat-label {{
        font-size: 0.7rem;
        text-transform: uppercase;
        color: rgba(255, 255, 255, 0.6);
        font-weight: 600;
        margin-bottom: 6px;
    }}
    .stat-value {{ font-size: 1.5rem; font-weight: 600; }}
    .stat-note {{ font-size: 0.75rem; color: rgba(255, 255, 255, 0.7); }}

    /* ===== DAY STRIP ===== */
    .day-row {{
        display: flex;
        overflow-x: auto;
        gap: 10px;
        scrollbar-width: none;
    }}
    .day-row::-webkit-scrollbar {{ display: none; }}
    .day-card {{
        flex: 0 0 120px;
        text-align: center;
        background: rgba(255, 255, 255, 0.08);
        border-radius: 12px;
        padding: 10px 6px;
        color: #ffffff;
    }}
    .day-card .d-name {{ font-weight: 600; font-size: 0.9rem; }}
    .day-card .d-icon {{ font-size: 2rem; margin: 4px 0; }}
    .day-card .d-temp {{ font-size: 1.2rem; font-weight: 700; }}
    .day-card .d-cond {{ font-size: 0.72rem; opacity: 0.75; min-height: 2em; }}
    .day-card .d-extra {{ font-size: 0.7rem; opacity: 0.9; }}

    .advisory {{
        white-space: pre-line;
        font-size: 0.95rem;
        line-height: 1.5;
    }}
    .prompt {{
        text-align: center;
        color: #ffffff;
        padding: 40px 0;
    }}

    /* ===== CHAT BUBBLES ===== */
    .chat-user {{
        background: rgba(33, 150, 243, 0.25);
        border-radius: 16px 16px 4px 16px;
        padding: 10px 14px;
        margin: 6px 0;
        color: #ffffff;
        font-size: 0.9rem;
    }}
    .chat-assistant {{
        background: rgba(255, 255, 255, 0.1);
        border-radius: 16px 16px 16px 4px;
        padding: 10px 14px;
        margin: 6px 0;
        color: rgba(255,255,255,0.9);
        font-size: 0.9rem;
    }}

    /* ===== STREAMLIT OVERRIDES ===== */
    .stMarkdown, .stMarkdown p, .stMarkdown li {{
        color: #ffffff !important;
    }}
    .stTextInput > div > div > input {{
        background: rgba(255, 255, 255, 0.1) !important;
        border: 1px solid rgba(255, 255, 255, 0.2) !important;
        color: #ffffff !important;
        border-radius: 12px !important;
    }}
    .stAlert {{
        background: rgba(255,255,255,0.08) !important;
        border: 1px solid rgba(255,255,255,0.15) !important;
        border-radius: 12px !important;
    }}
    </style>
    """, unsafe_allow_html=True)


def _render_animation(placeholder, css: str | None) -> None:
    """Write a screen's decorative animation into its own placeholder.

    The placeholder belongs to the current script run; when the screen is
    not rendered on the next run the style disappears with it.
    """
    if css:
        placeholder.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
    else:
        placeholder.empty()


# ---------------------------------------------------------------------------
# Session-owned screen controllers
# ---------------------------------------------------------------------------

@st.cache_data(ttl=600, show_spinner=False)
def _cached_forecast(query: str, days: int) -> dict:
    """Fetch a raw forecast response (cached for 10 minutes)."""
    return weatherapi_client.get_forecast(query, days)


@st.cache_data(ttl=600, show_spinner=False)
def _cached_current(query: str) -> dict:
    """Fetch a raw current-conditions response (cached for 10 minutes)."""
    return weatherapi_client.get_current(query)


_SCREENS = {
    "today_screen": (TodayScreen, _cached_current),
    "current_screen": (CurrentWeatherScreen, _cached_forecast),
    "forecast_screen": (ForecastScreen, _cached_forecast),
}


def _get_screen(key: str):
    """Return this session's controller for a screen, creating it once."""
    if key not in st.session_state:
        factory, fetch = _SCREENS[key]
        st.session_state[key] = factory(fetch=fetch)
    return st.session_state[key]


def _query_coordinates() -> tuple[float, float]:
    """Read `lat`/`lon` from the URL; missing or invalid values read as 0."""
    return (
        parse_coordinate(st.query_params.get("lat")),
        parse_coordinate(st.query_params.get("lon")),
    )


def _unit() -> str:
    return st.session_state.get("unit", "C")


# ---------------------------------------------------------------------------
# Render: Header (clock ticks in its own fragment)
# ---------------------------------------------------------------------------

@st.fragment(run_every="1s")
def _render_clock() -> None:
    """Re-render the clock every second without rerunning the page."""
    long_date, time_label = clock_labels(datetime.now())
    st.markdown(
        f'<div class="wx-clock">'
        f'<div class="c-date">{long_date}</div>'
        f'<div class="c-time">{time_label}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_header() -> None:
    col_title, col_clock = st.columns([3, 2])
    col_title.markdown(
        '<div class="wx-header"><div class="wx-title">\u2601\ufe0f WeatherNow</div></div>',
        unsafe_allow_html=True,
    )
    with col_clock:
        _render_clock()


# ---------------------------------------------------------------------------
# Render: Sidebar (navigation, units, share location)
# ---------------------------------------------------------------------------

def _share_location(place: str) -> None:
    """Resolve a place and open the forecast page at its coordinates."""
    try:
        location = geocode_location(place)
    except GeocodingError as exc:
        st.session_state["share_error"] = str(exc)
        return
    st.session_state.pop("share_error", None)
    st.query_params["lat"] = f"{location.latitude:.4f}"
    st.query_params["lon"] = f"{location.longitude:.4f}"
    st.query_params["page"] = FORECAST


def _render_sidebar() -> str:
    """Render navigation and settings; return the selected page."""
    with st.sidebar:
        st.markdown("### \U0001f30d WeatherNow")

        pages = [TODAY, DASHBOARD, FORECAST]
        icons = {TODAY: "\U0001f3e0 ", DASHBOARD: "\U0001f4ca ", FORECAST: "\U0001f4c5 "}
        current = st.query_params.get("page", TODAY)
        page = st.radio(
            "Page",
            pages,
            index=pages.index(current) if current in pages else 0,
            format_func=lambda p: icons[p] + p,
        )
        if page != current:
            st.query_params["page"] = page

        st.radio(
            "Units",
            ["C", "F"],
            key="unit",
            horizontal=True,
            format_func=lambda u: f"\u00b0{u}",
        )

        st.markdown("---")
        with st.form("share_location"):
            place = st.text_input(
                "\U0001f4cd Share location",
                placeholder="e.g., Lahore or 10001",
            )
            if st.form_submit_button("Share Location", use_container_width=True):
                _share_location(place)
                st.rerun()
        if st.session_state.get("share_error"):
            st.error(st.session_state["share_error"])

    return page


# ---------------------------------------------------------------------------
# Render: Dashboard
# ---------------------------------------------------------------------------

def _stat_card(col, emoji: str, label: str, value: str, note: str) -> None:
    col.markdown(
        f'<div class="stat-card">'
        f'<div class="stat-label">{emoji} {label}</div>'
        f'<div class="stat-value">{value}</div>'
        f'<div class="stat-note">{note}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_current(view: CurrentView) -> None:
    """Render current conditions, stat cards, advisory and the 5-day strip."""
    unit = _unit()
    weather = view.weather
    c = weather.current

    icon_html = (
        f'<img src="https:{c.icon_url}" alt="{c.condition}" width="64" height="64">'
        if c.icon_url.startswith("//") else f'<span style="font-size:3rem">{view.icon}</span>'
    )
    st.markdown(
        f'<div class="wx-now">'
        f'<div class="n-city">{weather.location_name}</div>'
        f'<div class="n-country">{weather.country}</div>'
        f'{icon_html}'
        f'<div class="n-temp">{format_temperature(c.temperature_c, unit)}</div>'
        f'<div class="n-cond">{c.condition}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )

    cols = st.columns(4)
    _stat_card(cols[0], "\U0001f321\ufe0f", "Temperature",
               format_temperature(c.temperature_c, unit),
               f"Feels like {format_temperature(c.feels_like_c, unit)}")
    _stat_card(cols[1], "\U0001f4a8", "Wind", f"{c.wind_kph} km/h",
               f"\U0001f9ed {c.wind_direction}")
    _stat_card(cols[2], "\U0001f4a7", "Humidity", f"{c.humidity}%",
               f"Pressure: {c.pressure_mb} mb")
    _stat_card(cols[3], "\u2600\ufe0f", "UV Index", f"{c.uv_index}",
               f"Visibility: {c.visibility_km} km")

    cols = st.columns(4)
    _stat_card(cols[0], "\U0001f305", "Sunrise", display_value(c.sunrise),
               f"Sunset: {display_value(c.sunset)}")
    _stat_card(cols[1], "\U0001f4c5", "Date", datetime.now().strftime("%x"),
               c.condition)
    _stat_card(cols[2], "\U0001f4cd", "Location", weather.location_name,
               f"Updated {c.last_updated}" if c.last_updated else "")
    _stat_card(cols[3], "\U0001f327\ufe0f", "Precipitation",
               display_value(c.precipitation_mm, " mm"),
               f"Air quality: {display_value(c.air_quality)}")

    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">\U0001f52e Weather Prediction</div>'
        f'<div class="advisory">{view.advisory}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )

    if weather.days:
        cards = build_forecast_view(weather).cards
        items = "".join(
            f'<div class="day-card">'
            f'<div class="d-name">{card.day.date}</div>'
            f'<div class="d-icon">{card.icon}</div>'
            f'<div class="d-temp">{format_temperature(card.day.max_temp_c, unit)}'
            f' / {format_temperature(card.day.min_temp_c, unit)}</div>'
            f'<div class="d-extra">\U0001f4a7 {card.day.rain_chance}%</div>'
            f'<div class="d-extra">\U0001f4a8 {card.day.max_wind_kph} km/h</div>'
            f'</div>'
            for card in cards
        )
        st.markdown(
            f'<div class="glass-card">'
            f'<div class="section-label">{len(cards)}-Day Forecast</div>'
            f'<div class="day-row">{items}</div>'
            f'</div>',
            unsafe_allow_html=True,
        )


def _render_search_page(key: str, render_view) -> Category | None:
    """Search form plus URL coordinates for a current-conditions screen.

    Returns the loaded category, if any.
    """
    screen: CurrentWeatherScreen = _get_screen(key)
    source_key = f"{key}_source"
    animation = st.empty()

    with st.form(f"{key}_search"):
        col_input, col_btn = st.columns([5, 1])
        city = col_input.text_input(
            "Search city", placeholder="Search city...", label_visibility="collapsed"
        )
        submitted = col_btn.form_submit_button("\U0001f50d", use_container_width=True)

    lat, lon = _query_coordinates()
    source = st.session_state.get(source_key)
    if submitted:
        if city.strip():
            st.session_state[source_key] = ("city", city.strip())
        with st.spinner("Loading..."):
            screen.load_city(city)
    elif source is None or (source[0] == "coords" and source[1] != (lat, lon)):
        st.session_state[source_key] = ("coords", (lat, lon))
        with st.spinner("Loading..."):
            screen.load_coordinates(lat, lon)

    if screen.validation_message:
        st.error(screen.validation_message)

    state = screen.state
    if state.is_error:
        st.error(state.message)
        return None
    if not state.is_success:
        if not screen.validation_message:
            st.info(LOCATION_ERROR_MESSAGE)
        return None

    view: CurrentView = state.data
    _render_animation(animation, view.animation)
    render_view(view)
    return view.category


def _render_dashboard() -> Category | None:
    """Render the dashboard page; return the loaded category, if any."""
    return _render_search_page("current_screen", _render_current)


# ---------------------------------------------------------------------------
# Render: Today (current conditions only)
# ---------------------------------------------------------------------------

def _render_today_body(view: CurrentView) -> None:
    unit = _unit()
    weather = view.weather
    c = weather.current

    icon_html = (
        f'<img src="https:{c.icon_url}" alt="{c.condition}" width="64" height="64">'
        if c.icon_url.startswith("//") else f'<span style="font-size:3rem">{view.icon}</span>'
    )
    st.markdown(
        f'<div class="wx-now">'
        f'<div class="n-city">{weather.location_name}</div>'
        f'<div class="n-country">{weather.country}</div>'
        f'{icon_html}'
        f'<div class="n-temp">{format_temperature(c.temperature_c, unit)}</div>'
        f'<div class="n-cond">{c.condition}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )

    cols = st.columns(2)
    _stat_card(cols[0], "\U0001f321\ufe0f", "Feels Like",
               format_temperature(c.feels_like_c, unit), "")
    _stat_card(cols[1], "\U0001f4a7", "Humidity", f"{c.humidity}%", "")
    cols = st.columns(2)
    _stat_card(cols[0], "\U0001f4a8", "Wind", f"{c.wind_kph} km/h", c.wind_direction)
    _stat_card(cols[1], "\U0001f30a", "Pressure", f"{c.pressure_mb} mb", "")

    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">\U0001f52e Weather Prediction</div>'
        f'<div class="advisory">{view.advisory}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_today() -> Category | None:
    """Render the Today page; return the loaded category, if any."""
    return _render_search_page("today_screen", _render_today_body)


# ---------------------------------------------------------------------------
# Render: Forecast page
# ---------------------------------------------------------------------------

def _render_forecast_body(view: ForecastView) -> None:
    unit = _unit()

    if view.advisory is not None:
        st.markdown(
            f'<div class="glass-card">'
            f'<div class="section-label">Weather Prediction \U0001f52e</div>'
            f'<div class="advisory">{view.advisory}</div>'
            f'</div>',
            unsafe_allow_html=True,
        )
    else:
        st.caption("Not enough forecast days for a prediction.")

    items = "".join(
        f'<div class="day-card">'
        f'<div class="d-name">{card.weekday}</div>'
        f'<div class="d-icon">{card.icon}</div>'
        f'<div class="d-temp">{format_temperature(card.day.avg_temp_c, unit)}</div>'
        f'<div class="d-cond">{card.day.condition}</div>'
        f'<div class="d-extra">\U0001f4a7 {card.day.rain_chance}% rain</div>'
        f'<div class="d-extra">\U0001f4a8 {round(card.day.max_wind_kph)} km/h</div>'
        f'<div class="d-extra">\u2600\ufe0f UV: {display_value(card.day.uv)}</div>'
        f'</div>'
        for card in view.cards
    )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">{len(view.cards)}-Day Forecast \U0001f4c5'
        f' &middot; {view.weather.location_name}</div>'
        f'<div class="day-row">{items}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )

    h = view.highlights
    if h is not None:
        cols = st.columns(3)
        _stat_card(cols[0], "\U0001f305", "Sunrise & Sunset", h.sunrise,
                   f"\U0001f307 {h.sunset}")
        _stat_card(cols[1], "\U0001f319", "Moon Phase", h.moon_phase,
                   f"{h.moon_illumination}% illumination")
        _stat_card(cols[2], "\U0001f4a8", "Air Quality", f"{h.air_quality} US EPA",
                   f"\U0001f32c\ufe0f {round(h.wind_kph)} km/h winds")


def _render_forecast() -> Category | None:
    """Render the forecast page; return the loaded category, if any."""
    screen: ForecastScreen = _get_screen("forecast_screen")

    lat, lon = _query_coordinates()
    if st.session_state.get("forecast_source") != (lat, lon):
        st.session_state["forecast_source"] = (lat, lon)
        with st.spinner("Loading your forecast... \u231b"):
            screen.load(lat, lon)

    if screen.needs_location:
        st.markdown(
            f'<div class="prompt"><h2>{SHARE_LOCATION_PROMPT}</h2>'
            f'<p>{SHARE_LOCATION_HINT}</p></div>',
            unsafe_allow_html=True,
        )
        return None

    state = screen.state
    if state.is_error:
        st.error(f"Oops! Something went wrong \U0001f614 {state.message}")
        return None
    if not state.is_success:
        return None

    view: ForecastView = state.data
    _render_forecast_body(view)
    _render_chat(view)
    return view.category


# ---------------------------------------------------------------------------
# Render: Chat Q&A
# ---------------------------------------------------------------------------

def _render_chat(view: ForecastView) -> None:
    """Render the weather chat section below the forecast."""
    if not chat_available():
        return

    history_key = "forecast_messages"
    if history_key not in st.session_state:
        st.session_state[history_key] = []

    st.markdown(
        '<div class="glass-card">'
        '<div class="section-label">\U0001f4ac ASK ABOUT THE WEATHER</div>'
        '</div>',
        unsafe_allow_html=True,
    )

    for msg in st.session_state[history_key]:
        css = "chat-user" if msg["role"] == "user" else "chat-assistant"
        who = "You" if msg["role"] == "user" else "AI"
        st.markdown(
            f'<div class="{css}"><strong>{who}:</strong> {msg["content"]}</div>',
            unsafe_allow_html=True,
        )

    with st.form("chat_form", clear_on_submit=True):
        question = st.text_input(
            "Ask a question",
            placeholder="Will it rain tomorrow? Should I bring a jacket?",
        )
        asked = st.form_submit_button("Ask \u2192", type="primary", use_container_width=True)

    if asked and question.strip():
        history = st.session_state[history_key]
        try:
            answer = ask_weather_question(question.strip(), view.weather, chat_history=history)
        except ChatError as exc:
            answer = f"Sorry, something went wrong: {exc}"
        history.append({"role": "user", "content": question.strip()})
        history.append({"role": "assistant", "content": answer})
        st.rerun()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    """Main Streamlit application entry point."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(
        page_title="WeatherNow",
        page_icon="\U0001f326\ufe0f",
        layout="centered",
    )

    page = _render_sidebar()
    header = st.container()

    if page == FORECAST:
        category = _render_forecast()
        gradient = DEFAULT_GRADIENT
    elif page == DASHBOARD:
        category = _render_dashboard()
        gradient = _get_screen("current_screen").theme
    else:
        category = _render_today()
        gradient = _get_screen("today_screen").theme

    _inject_css(gradient, category)
    with header:
        _render_header()


if __name__ == "__main__":
    main()

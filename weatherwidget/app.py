"""Streamlit page for the US weather widget.

Run with: streamlit run weatherwidget/app.py

Search a US city ("Concord, NH", "Austin TX"), pick from the candidate list
when the name is ambiguous, and see current conditions, a 10-day grid and
the next 24 hours. The last location is restored on the next visit.
"""

from __future__ import annotations

import base64
import functools
import logging

import streamlit as st

from weatherwidget import config
from weatherwidget.presentation import UIState, WeatherView
from weatherwidget.store import JsonFileBackend, LastLocationStore, MappingBackend
from weatherwidget.weather_codes import WeatherCodeEntry
from weatherwidget.widget import WeatherWidget

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

# Shown when the icon file is not present in config.ICON_DIR
_ICON_EMOJI: dict[str, str] = {
    "0.png": "☀️",
    "2.png": "⛅",
    "3.png": "☁️",
    "61.png": "\U0001f326️",
    "65.png": "\U0001f327️",
    "71.png": "\U0001f328️",
    "73.png": "❄️",
    "95.png": "⛈️",
    "unknown.png": "\U0001f321️",
}


@functools.lru_cache(maxsize=32)
def _icon_data_uri(icon: str) -> str | None:
    """Base64 data URI for an icon file, or None if it cannot be read."""
    path = config.ICON_DIR / icon
    try:
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    except OSError:
        return None
    return f"data:image/png;base64,{encoded}"


def _icon_html(entry: WeatherCodeEntry) -> str:
    uri = _icon_data_uri(entry.icon)
    if uri:
        return f'<img src="{uri}" alt="{entry.label}" class="weather-icon">'
    emoji = _ICON_EMOJI.get(entry.icon, _ICON_EMOJI["unknown.png"])
    return f'<span class="weather-icon">{emoji}</span>'


# ---------------------------------------------------------------------------
# Background gradients
# ---------------------------------------------------------------------------

_WEATHER_GRADIENTS: dict[str, str] = {
    "clear": "linear-gradient(180deg, #1e88e5 0%, #42a5f5 40%, #64b5f6 100%)",
    "cloudy": "linear-gradient(180deg, #546e7a 0%, #78909c 50%, #90a4ae 100%)",
    "rain": "linear-gradient(180deg, #37474f 0%, #455a64 50%, #546e7a 100%)",
    "snow": "linear-gradient(180deg, #607d8b 0%, #90a4ae 50%, #cfd8dc 100%)",
    "thunder": "linear-gradient(180deg, #1a1a2e 0%, #2d2d44 50%, #1a1a2e 100%)",
    "default": "linear-gradient(180deg, #1a1a2e 0%, #16213e 50%, #0f3460 100%)",
}


def _inject_css(gradient: str) -> None:
    """Inject glass-card CSS with a weather-dependent page gradient."""
    st.markdown(f"""
    <style>
    .stApp {{
        background: {gradient} !important;
    }}
    #MainMenu {{visibility: hidden;}}
    footer {{visibility: hidden;}}
    .block-container {{
        padding-top: 1rem !important;
        max-width: 760px !important;
    }}

    .glass-card {{
        background: rgba(255, 255, 255, 0.08);
        backdrop-filter: blur(20px);
        border-radius: 16px;
        border: 1px solid rgba(255, 255, 255, 0.12);
        padding: 16px;
        margin-bottom: 14px;
    }}
    .section-label {{
        font-size: 0.75rem;
        text-transform: uppercase;
        letter-spacing: 0.5px;
        color: rgba(255, 255, 255, 0.55);
        font-weight: 600;
        margin-bottom: 10px;
    }}

    .wx-header {{ text-align: center; padding: 10px 0 16px 0; }}
    .wx-location {{ font-size: 1.4rem; color: #ffffff; font-weight: 500; }}
    .wx-temp {{ font-size: 4.5rem; font-weight: 200; color: #ffffff; line-height: 1.05; }}
    .wx-condition {{ font-size: 1.1rem; color: rgba(255, 255, 255, 0.8); }}
    .weather-icon {{ height: 32px; vertical-align: middle; font-size: 1.4rem; }}

    .forecast-grid {{
        display: grid;
        grid-template-columns: repeat(auto-fill, minmax(120px, 1fr));
        gap: 10px;
    }}
    .forecast-day {{ text-align: center; color: #ffffff; font-size: 0.85rem; }}
    .forecast-day .day {{ font-weight: 600; margin-bottom: 4px; }}
    .forecast-day .label {{ color: rgba(255,255,255,0.7); margin: 4px 0; }}

    .hourly-row {{
        display: flex;
        overflow-x: auto;
        scrollbar-width: none;
    }}
    .hourly-row::-webkit-scrollbar {{ display: none; }}
    .hour {{ flex: 0 0 96px; text-align: center; padding: 6px 2px; color: #ffffff; }}
    .hour .time {{ font-size: 0.8rem; font-weight: 600; }}
    .hour .desc {{ font-size: 0.7rem; color: rgba(255,255,255,0.7); min-height: 28px; }}
    .hour .meta {{ font-size: 0.72rem; color: #bbdefb; }}

    .stMarkdown, .stMarkdown p {{ color: #ffffff !important; }}
    .stTextInput > div > div > input {{
        background: rgba(255, 255, 255, 0.1) !important;
        border: 1px solid rgba(255, 255, 255, 0.2) !important;
        color: #ffffff !important;
        border-radius: 12px !important;
    }}
    </style>
    """, unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Session objects
# ---------------------------------------------------------------------------

def _make_store() -> LastLocationStore:
    """Last-location store for this visitor."""
    if config.STORE_BACKEND == "file":
        return LastLocationStore(JsonFileBackend(config.STORE_PATH))
    return LastLocationStore(MappingBackend(st.query_params))


def _get_widget() -> WeatherWidget:
    """Build the widget once per session and restore the last location."""
    if "widget" not in st.session_state:
        widget = WeatherWidget(view=WeatherView(), store=_make_store())
        st.session_state.widget = widget
        with st.spinner("Loading last location..."):
            if widget.restore():
                st.session_state.search_input = widget.raw
    return st.session_state.widget


def _on_search() -> None:
    widget: WeatherWidget = st.session_state.widget
    widget.search(st.session_state.get("search_input", ""))


def _render_search_form() -> None:
    """Search box and button; one submit runs one search."""
    with st.form("search", border=False):
        col_input, col_button = st.columns([4, 1])
        col_input.text_input(
            "Search for a US city",
            placeholder="e.g., Concord, NH  or  Austin TX",
            key="search_input",
            label_visibility="collapsed",
        )
        col_button.form_submit_button(
            "Search", on_click=_on_search, use_container_width=True
        )


# ---------------------------------------------------------------------------
# Render sections
# ---------------------------------------------------------------------------

def _render_header(view: WeatherView) -> None:
    if isinstance(view.description, WeatherCodeEntry):
        condition = f"{_icon_html(view.description)} {view.description.label}"
    else:
        condition = view.description
    st.markdown(
        f'<div class="wx-header">'
        f'<div class="wx-location">{view.header}</div>'
        f'<div class="wx-temp">{view.temperature}</div>'
        f'<div class="wx-condition">{condition}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_candidates(widget: WeatherWidget) -> None:
    view = widget.view
    if view.state is not UIState.CHOOSING or not view.candidates:
        return
    st.markdown('<div class="section-label">Did you mean</div>', unsafe_allow_html=True)
    for i, place in enumerate(view.candidates):
        st.button(
            widget.candidate_label(place),
            key=f"candidate_{i}",
            on_click=widget.choose,
            args=(place,),
            use_container_width=True,
        )


def _render_forecast(view: WeatherView) -> None:
    if not view.forecast:
        return
    cells = ""
    for row in view.forecast:
        high = f"{row.high}°F" if row.high is not None else "--"
        low = f"{row.low}°F" if row.low is not None else "--"
        cells += (
            f'<div class="forecast-day">'
            f'<div class="day">{row.day}</div>'
            f'{_icon_html(row.weather)}'
            f'<div class="label">{row.weather.label}</div>'
            f'<div class="temps">High: {high}<br>Low: {low}</div>'
            f'</div>'
        )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">{len(view.forecast)}-Day Forecast</div>'
        f'<div class="forecast-grid">{cells}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


def _render_hourly(view: WeatherView) -> None:
    if not view.hourly:
        return
    cells = ""
    for cell in view.hourly:
        cells += (
            f'<div class="hour">'
            f'<div class="time">{cell.time}</div>'
            f'{_icon_html(cell.weather)}'
            f'<div class="desc">{cell.weather.label}</div>'
            f'<div class="meta">{cell.details}</div>'
            f'</div>'
        )
    st.markdown(
        f'<div class="glass-card">'
        f'<div class="section-label">Next {len(view.hourly)} Hours</div>'
        f'<div class="hourly-row">{cells}</div>'
        f'</div>',
        unsafe_allow_html=True,
    )


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
        page_title="Weather",
        page_icon="\U0001f326️",
        layout="centered",
    )

    widget = _get_widget()
    view = widget.view

    _render_search_form()

    _inject_css(_WEATHER_GRADIENTS.get(view.background, _WEATHER_GRADIENTS["default"]))
    _render_header(view)
    _render_candidates(widget)
    _render_forecast(view)
    _render_hourly(view)


if __name__ == "__main__":
    main()

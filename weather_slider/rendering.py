"""
HTML rendering of normalized forecast days.

Every function here is pure: it takes models and returns markup rendered
from the jinja2 templates in ``templates/``. Autoescaping is on, so provider
text is always escaped.
"""

import os
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from weather_slider.config import ExternalAPIConfig
from weather_slider.models import DayBucket, ElementIds, ForecastEntry

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")

NO_DATA_MESSAGE = "No forecast data available to display."

templates = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _parse_date(date: str) -> datetime:
    return datetime.strptime(date, "%Y-%m-%d")


def format_entry_time(entry: ForecastEntry) -> str:
    """``'2024-01-01 15:00:00'`` -> ``'15:00'``"""
    return datetime.strptime(entry.dt_txt, "%Y-%m-%d %H:%M:%S").strftime("%H:%M")


def _format_number(value: Optional[float], fmt: str = "{}") -> str:
    if value is None:
        return "n/a"
    return fmt.format(value)


def render_detail_panel(entry: ForecastEntry) -> str:
    """Render the detail block for one entry."""
    condition = entry.condition
    icon_url = None
    if condition is not None and condition.icon:
        icon_url = ExternalAPIConfig.ICON_URL_TEMPLATE.format(icon=condition.icon)

    return templates.get_template("detail_panel.html.j2").render(
        time=format_entry_time(entry),
        condition=condition,
        icon_url=icon_url,
        temp=_format_number(entry.main.temp, "{:.1f}"),
        humidity=_format_number(entry.main.humidity),
        wind_speed=_format_number(entry.wind.speed if entry.wind else None),
    )


class SliderBinding:
    """
    A time slider over a list of entries.

    Each position maps to one detail panel produced by ``render_entry``.
    Panels are scoped by ``slider_id`` so sliders never affect each other.
    """

    def __init__(
        self,
        slider_id: str,
        entries: Sequence[ForecastEntry],
        render_entry: Callable[[ForecastEntry], str],
        slider_class: str = "time-slider",
        details_class: str = "slider-details",
        empty_message: str = "No specific time data.",
    ):
        self.slider_id = slider_id
        self.entries = list(entries)
        self.render_entry = render_entry
        self.slider_class = slider_class
        self.details_class = details_class
        self.empty_message = empty_message

    def select(self, index: int) -> str:
        """Render the detail panel for the entry at ``index``."""
        if not 0 <= index < len(self.entries):
            raise IndexError(
                f"Slider {self.slider_id} has no entry at position {index}"
            )
        return self.render_entry(self.entries[index])

    def render(self, selected: int = 0) -> str:
        """
        Render the range input and every panel, ``selected`` visible.

        The input is left out when there is at most one entry.
        """
        panels = [Markup(self.select(index)) for index in range(len(self.entries))]
        if panels and not 0 <= selected < len(panels):
            raise IndexError(
                f"Slider {self.slider_id} has no entry at position {selected}"
            )
        return templates.get_template("slider.html.j2").render(
            slider_id=self.slider_id,
            panels=panels,
            selected=selected,
            slider_class=self.slider_class,
            details_class=self.details_class,
            empty_message=self.empty_message,
        )


def render_today_section(bucket: DayBucket) -> str:
    slider = SliderBinding(
        "today",
        bucket.entries,
        render_detail_panel,
        slider_class="today-time-slider",
        details_class="today-slider-details",
        empty_message="No specific time data for today.",
    )
    return templates.get_template("today_section.html.j2").render(
        day=_parse_date(bucket.date), slider=Markup(slider.render())
    )


def render_forecast_card(bucket: DayBucket) -> str:
    slider = SliderBinding(
        f"day-{bucket.date}",
        bucket.entries,
        render_detail_panel,
        slider_class="forecast-time-slider",
        details_class="forecast-slider-details",
    )
    return templates.get_template("forecast_card.html.j2").render(
        day=_parse_date(bucket.date), slider=Markup(slider.render())
    )


def render_error(message: str) -> str:
    return templates.get_template("error.html.j2").render(message=message)


def render_weather_display(days: List[DayBucket]) -> str:
    """
    Render the results area.

    The first bucket is today's panel, the rest become forecast cards.
    Without any bucket the "no data" message is rendered instead.
    """
    if not days:
        return render_error(NO_DATA_MESSAGE)

    return templates.get_template("weather_display.html.j2").render(
        today=Markup(render_today_section(days[0])),
        cards=[Markup(render_forecast_card(day)) for day in days[1:]],
    )


def render_page(
    element_ids: ElementIds, content: str = "", search_path: str = "/search"
) -> str:
    """
    Render the full search page with ``content`` in the display area.

    The search box is a GET form, so both the button and the Enter key
    submit it. The input is always rendered empty. ``content`` is trusted
    markup from the other render functions.
    """
    return templates.get_template("page.html.j2").render(
        ids=element_ids, content=Markup(content), search_path=search_path
    )

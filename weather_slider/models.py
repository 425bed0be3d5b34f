"""
Pydantic models for provider payloads and normalized forecast days.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherCondition(BaseModel):
    """One weather condition as reported by OpenWeatherMap."""

    id: Optional[int] = None
    main: str = ""
    description: str = ""
    icon: str = ""


class MainReadings(BaseModel):
    """Temperature and humidity block."""

    temp: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    pressure: Optional[int] = None


class Wind(BaseModel):
    speed: Optional[float] = None
    deg: Optional[int] = None


class WeatherSnapshot(BaseModel):
    """Response of the current weather endpoint."""

    name: str = ""
    dt: Optional[int] = Field(None, description="Data calculation time")
    main: MainReadings = Field(default_factory=MainReadings)
    weather: List[WeatherCondition] = Field(default_factory=list)
    wind: Optional[Wind] = None


class ForecastEntry(BaseModel):
    """One 3-hour step of the forecast, or a converted snapshot."""

    dt: int
    dt_txt: str = Field(..., description="UTC time as 'YYYY-MM-DD HH:MM:SS'")
    main: MainReadings = Field(default_factory=MainReadings)
    weather: List[WeatherCondition] = Field(default_factory=list)
    wind: Optional[Wind] = None

    @property
    def date_key(self) -> str:
        return self.dt_txt.split(" ")[0]

    @property
    def condition(self) -> Optional[WeatherCondition]:
        if self.weather:
            return self.weather[0]
        return None


class ForecastCity(BaseModel):
    name: str = ""
    country: str = ""


class ForecastResponse(BaseModel):
    """Response of the 5 day / 3 hour forecast endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    entries: List[ForecastEntry] = Field(..., alias="list")
    city: Optional[ForecastCity] = None


class DayBucket(BaseModel):
    """Entries of one calendar day, in display order."""

    date: str
    entries: List[ForecastEntry]


class WeatherBundle(BaseModel):
    """Merged result of one search."""

    city: str
    current: Optional[WeatherSnapshot] = None
    forecast: ForecastResponse


class ForecastDaysResponse(BaseModel):
    """Response model for the JSON weather endpoint."""

    city: str
    has_current: bool
    days: List[DayBucket]


class ErrorResponse(BaseModel):
    """Response model for error cases."""

    error: str
    message: str
    status_code: int


class ElementIds(BaseModel):
    """DOM ids of the search page elements."""

    model_config = ConfigDict(frozen=True)

    search_form: str = "search-form"
    city_input: str = "city-input"
    search_button: str = "search-button"
    weather_display: str = "weather-display"

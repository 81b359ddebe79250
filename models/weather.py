from pydantic import BaseModel
from typing import Optional


class WeatherReading(BaseModel):
    """Conditions at a course around midday on the day of a round."""
    weather: str
    temp_c: Optional[float] = None
    wind_speed_kph: Optional[float] = None
    conditions: str = ""

    def describe(self) -> str:
        """Category, temperature and wind, e.g. 'Windy, 12.5°C, 30.2 km/h wind'."""
        parts = [self.weather]
        if self.temp_c is not None:
            parts.append(f"{self.temp_c}°C")
        if self.wind_speed_kph is not None and self.wind_speed_kph > 0:
            parts.append(f"{self.wind_speed_kph} km/h wind")
        return ", ".join(parts)

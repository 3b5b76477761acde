from __future__ import annotations

from pydantic import Field

from .common import ApiModel


class Location(ApiModel):
    id: str | None = Field(default=None, alias="_id")
    country: str | None = None
    country_ar: str | None = None
    area: str | None = None
    area_ar: str | None = None
    city: str | None = None
    city_ar: str | None = None
    village: str | None = None
    village_ar: str | None = None
    is_active: bool = True

    def parts(self, language: str = "en") -> list[str | None]:
        """Address parts from the most to the least specific."""
        if language == "ar":
            return [self.village_ar, self.city_ar, self.area_ar, self.country_ar]
        return [self.village, self.city, self.area, self.country]


LocationRef = Location | str


__all__ = ["Location", "LocationRef"]

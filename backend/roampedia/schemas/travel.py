from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator


class ListItemCreate(BaseModel):
    country_code: str = Field(..., min_length=1, max_length=10)
    country_name: str | None = None
    region: str | None = None
    flag_url: str | None = None


class ListItemUpdate(BaseModel):
    country_name: str | None = None
    region: str | None = None
    flag_url: str | None = None
    date_visited: datetime | None = None


class TravelNoteCreate(BaseModel):
    country_name: str = Field(..., min_length=1)
    country_code: str = Field(..., min_length=1, max_length=10)
    notes: str = ""
    priority: str = ""
    flag_url: str | None = None
    region: str | None = None


class TravelNoteUpdate(BaseModel):
    country_name: str | None = None
    notes: str | None = None
    priority: str | None = None
    flag_url: str | None = None
    region: str | None = None


class ExperienceCreate(BaseModel):
    country: str = Field(..., min_length=1)
    experience: str = Field(..., min_length=1, max_length=1000)
    themes: list[str] = Field(..., min_length=1, max_length=2)
    rating: int = Field(..., ge=1, le=10)
    from_date: date
    to_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.to_date < self.from_date:
            raise ValueError("to_date must not be before from_date")
        return self


class ExperienceUpdate(BaseModel):
    country: str | None = Field(None, min_length=1)
    experience: str | None = Field(None, min_length=1, max_length=1000)
    themes: list[str] | None = Field(None, min_length=1, max_length=2)
    rating: int | None = Field(None, ge=1, le=10)
    from_date: date | None = None
    to_date: date | None = None

import uuid
from datetime import date

from pydantic import BaseModel, Field


class ExpenseItem(BaseModel):
    category: str = Field(..., min_length=1)
    budget: float = Field(0, ge=0)
    actual: float = Field(0, ge=0)
    notes: str | None = None


class ExpenseBatchRequest(BaseModel):
    """Replace every expense (optionally scoped to one trip) with this list."""
    expenses: list[ExpenseItem]
    trip_id: uuid.UUID | None = None


class ExpenseUpdate(BaseModel):
    category: str | None = Field(None, min_length=1)
    budget: float | None = Field(None, ge=0)
    actual: float | None = Field(None, ge=0)
    notes: str | None = None


class ItineraryCreate(BaseModel):
    home_country: str | None = None
    destination: str | None = None
    departure_date: date | None = None
    return_date: date | None = None
    adults: int = Field(1, ge=0)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    budget_min: float | None = Field(None, ge=0)
    budget_max: float | None = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)


class ItineraryUpdate(BaseModel):
    home_country: str | None = None
    destination: str | None = None
    departure_date: date | None = None
    return_date: date | None = None
    adults: int | None = Field(None, ge=0)
    children: int | None = Field(None, ge=0)
    infants: int | None = Field(None, ge=0)
    budget_min: float | None = Field(None, ge=0)
    budget_max: float | None = Field(None, ge=0)
    currency: str | None = Field(None, min_length=3, max_length=3)


class TaskCreate(BaseModel):
    # Both are required; the router answers 400 "Missing fields" rather than 422
    itinerary_id: uuid.UUID | None = None
    text: str | None = Field(None, max_length=500)

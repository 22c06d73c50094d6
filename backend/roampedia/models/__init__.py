from roampedia.models.user import User
from roampedia.models.country import Country
from roampedia.models.preference import UserPreference
from roampedia.models.travel_list import TravelNote, Visited, WishlistItem
from roampedia.models.experience import UserExperience
from roampedia.models.planning import Expense, Itinerary, Task
from roampedia.models.attraction import Attraction

__all__ = [
    "Attraction",
    "Country",
    "Expense",
    "Itinerary",
    "Task",
    "TravelNote",
    "User",
    "UserExperience",
    "UserPreference",
    "Visited",
    "WishlistItem",
]

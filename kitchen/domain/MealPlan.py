"""MealPlan domain entity: dated breakfast/lunch/dinner/snacks assignments over a date range.

Meal entries are held in a dict keyed by calendar date (insertion ordered), so
looking up the entry for a date never depends on time of day and a date can
only hold one entry.
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterator, List, Optional

from kitchen.domain.Recipe import utc_now
from kitchen.utilities.constants import MEAL_SLOTS, SINGLE_SLOTS, SNACKS_SLOT
from kitchen.utilities.errors import ValidationFailure


def normalize_date(value) -> date:
    """Return the calendar date of a date, datetime or ISO string (time of day ignored)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise ValidationFailure(f"Invalid date: {value!r}")


def _check_slot(slot: str):
    if slot not in MEAL_SLOTS:
        raise ValidationFailure(f"Invalid meal type: {slot!r} (expected one of {', '.join(MEAL_SLOTS)})")


class MealEntry:
    def __init__(self, day: date, breakfast: Optional[str] = None, lunch: Optional[str] = None,
                 dinner: Optional[str] = None, snacks: Optional[List[str]] = None):
        self.date = day
        self.breakfast = breakfast
        self.lunch = lunch
        self.dinner = dinner
        self.snacks = list(dict.fromkeys(snacks or []))

    def recipe_ids(self) -> List[str]:
        """Assigned recipe ids in slot order (breakfast, lunch, dinner, snacks)."""
        ids = [getattr(self, slot) for slot in SINGLE_SLOTS]
        ids.extend(self.snacks)
        return [i for i in ids if i]

    def is_empty(self) -> bool:
        return not self.recipe_ids()

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return MealEntry(
            normalize_date(d.get("date")),
            breakfast=d.get("breakfast") or None,
            lunch=d.get("lunch") or None,
            dinner=d.get("dinner") or None,
            snacks=[s for s in d.get("snacks") or [] if s],
        )

    def to_dict(self):
        return {
            "date": self.date.isoformat(),
            "breakfast": self.breakfast,
            "lunch": self.lunch,
            "dinner": self.dinner,
            "snacks": list(self.snacks),
        }


class MealPlan:
    def __init__(self, user: str, name: str, start_date, end_date,
                 meals: Optional[List[MealEntry]] = None, is_active: bool = True,
                 notes: str = "", id: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        if not user:
            raise ValidationFailure("Meal plan owner is required")
        if not name or not name.strip():
            raise ValidationFailure("Meal plan name is required")
        if start_date is None or end_date is None:
            raise ValidationFailure("Start date and end date are required")
        self.id = id
        self.user = user
        self.name = name.strip()
        self.start_date = normalize_date(start_date)
        self.end_date = normalize_date(end_date)
        if self.end_date < self.start_date:
            raise ValidationFailure("End date must not be before start date")
        self.meals: Dict[date, MealEntry] = {}
        self.set_meals(meals or [])
        self.is_active = is_active
        self.notes = notes or ""
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        return f"{self.name} ({self.start_date} - {self.end_date}) - {len(self.meals)} days"

    __repr__ = __str__

    # --- Meal entries ---------------------------------------------------------
    def set_meals(self, entries: List[MealEntry]):
        '''Replaces all meal entries. Two entries for the same date are rejected.'''
        keyed: Dict[date, MealEntry] = {}
        for entry in entries:
            if entry.date in keyed:
                raise ValidationFailure(f"Duplicate meal entry for {entry.date.isoformat()}")
            keyed[entry.date] = entry
        self.meals = keyed

    def prepopulate(self):
        '''Creates an empty entry for every day in [start_date, end_date] that has none.'''
        day = self.start_date
        while day <= self.end_date:
            self.meals.setdefault(day, MealEntry(day))
            day += timedelta(days=1)
        return self

    def entry_for(self, day) -> Optional[MealEntry]:
        return self.meals.get(normalize_date(day))

    def entries(self) -> Iterator[MealEntry]:
        return iter(self.meals.values())

    def recipe_ids(self) -> List[str]:
        """All assigned recipe ids across entries, in plan order, duplicates kept."""
        ids: List[str] = []
        for entry in self.entries():
            ids.extend(entry.recipe_ids())
        return ids

    # --- Slot mutation ----------------------------------------------------------
    def assign_slot(self, day, slot: str, recipe_id: Optional[str]) -> MealEntry:
        '''
        Assigns a recipe to a slot on the given date.
        A date without an entry gets a new one appended after the existing entries.
        Single slots are overwritten; snacks are appended unless already present.
        '''
        _check_slot(slot)
        key = normalize_date(day)
        entry = self.meals.get(key)
        if entry is None:
            entry = MealEntry(key)
            self.meals[key] = entry
        if slot == SNACKS_SLOT:
            if recipe_id and recipe_id not in entry.snacks:
                entry.snacks.append(recipe_id)
        else:
            setattr(entry, slot, recipe_id or None)
        self.touch()
        return entry

    def clear_slot(self, day, slot: str, recipe_id: Optional[str] = None) -> Optional[MealEntry]:
        '''
        Clears a slot on the given date; no entry for the date means nothing to clear.
        For snacks only the given recipe id is removed; without an id nothing changes.
        '''
        _check_slot(slot)
        entry = self.meals.get(normalize_date(day))
        if entry is None:
            return None
        if slot == SNACKS_SLOT:
            if recipe_id:
                entry.snacks = [s for s in entry.snacks if s != recipe_id]
        else:
            setattr(entry, slot, None)
        self.touch()
        return entry

    def touch(self):
        self.updated_at = utc_now()

    # --- Serialization ------------------------------------------------------------
    @staticmethod
    def from_dict(data):
        d = dict(data)
        return MealPlan(
            id=d.get("id"),
            user=d.get("user"),
            name=str(d.get("name") or ""),
            start_date=d.get("startDate"),
            end_date=d.get("endDate"),
            meals=[MealEntry.from_dict(m) for m in d.get("meals") or []],
            is_active=bool(d.get("isActive", True)),
            notes=str(d.get("notes") or ""),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user,
            "name": self.name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "meals": [entry.to_dict() for entry in self.entries()],
            "isActive": self.is_active,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

"""Unified filter state and per-view predicates.

One immutable ``FilterState`` is passed to every view. Predicates take
``(item, filters, reference)`` and return whether the item passes every
active filter. A filter is inactive while it holds the ``"all"`` sentinel
(or an empty search term).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from equine_center.errors import ValidationError
from equine_center.models import Horse, HorseStatus, Location, Owner, Race
from equine_center.services.joiner import HorseView, OwnerSummary, RaceHistory

ALL = "all"
ID_FILTERS = ("owner", "horse", "location", "race")

ItemT = TypeVar("ItemT")
Predicate = Callable[[Any, "FilterState", "FilterData | None"], bool]


class FilterState(BaseModel):
    """Shared filter selection. Immutable; derive new states with ``update_filter``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: str = ALL
    horse: str = ALL
    status: str = ALL
    location: str = ALL
    race: str = ALL
    search_term: str = ""

    @field_validator(*ID_FILTERS)
    @classmethod
    def _id_or_all(cls, value: str) -> str:
        value = value.strip()
        if value != ALL and not value.isdigit():
            raise ValueError("must be 'all' or an integer id")
        return value

    def id_value(self, name: str) -> int | None:
        """Parsed ID of an ID filter, or None while it is 'all'."""
        value = getattr(self, name)
        return None if value == ALL else int(value)

    @property
    def is_default(self) -> bool:
        return self == FilterState()


def build_filter_state(**values: Any) -> FilterState:
    """Build a FilterState, reporting bad input as a domain ValidationError."""
    try:
        return FilterState(**values)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid filter value",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def clear_filters() -> FilterState:
    """Every filter back to its sentinel."""
    return FilterState()


def update_filter(state: FilterState, key: str, value: str) -> FilterState:
    """New state with one filter replaced."""
    if key not in FilterState.model_fields:
        raise ValidationError(f"Unknown filter: {key}")
    return build_filter_state(**{**state.model_dump(), key: value})


@dataclass
class FilterData:
    """Reference data behind the filter option lists."""

    owners: list[Owner] = field(default_factory=list)
    horses: list[Horse] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)
    races: list[Race] = field(default_factory=list)
    statuses: list[str] = field(default_factory=lambda: [s.value for s in HorseStatus])


def matches_search(fields: Iterable[Any], search_term: str) -> bool:
    """Case-insensitive substring match over the space-joined non-empty fields."""
    if not search_term:
        return True
    haystack = " ".join(str(f) for f in fields if f).lower()
    return search_term.lower() in haystack


def _horse_passes(
    view: HorseView,
    filters: FilterState,
    status_value: str,
    search_fields: Iterable[Any],
) -> bool:
    owner_id = filters.id_value("owner")
    if owner_id is not None and view.horse.owner_id != owner_id:
        return False

    horse_id = filters.id_value("horse")
    if horse_id is not None and view.horse.id != horse_id:
        return False

    if filters.status != ALL and status_value != filters.status:
        return False

    location_id = filters.id_value("location")
    if location_id is not None and (view.location is None or view.location.id != location_id):
        return False

    race_id = filters.id_value("race")
    if race_id is not None and race_id not in view.race_ids:
        return False

    return matches_search(search_fields, filters.search_term)


def horse_search_fields(view: HorseView) -> list[Any]:
    horse = view.horse
    return [
        horse.name,
        horse.tracking_id,
        horse.registration_number,
        horse.breed,
        horse.color,
        view.owner.name if view.owner else None,
    ]


def horse_predicate(
    view: HorseView,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter joined horses; status compares against the horse status."""
    return _horse_passes(view, filters, view.horse.status, horse_search_fields(view))


def location_entry_predicate(
    entry,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter location-map entries; status compares against the location status."""
    view = entry.view
    search_fields = [
        view.horse.name,
        view.horse.tracking_id,
        view.owner.name if view.owner else None,
        view.location.name if view.location else None,
        view.stall_number,
    ]
    return _horse_passes(view, filters, entry.location_status.value, search_fields)


def status_entry_predicate(
    entry,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter command-center entries by their horse."""
    return horse_predicate(entry.view, filters, reference)


def problem_predicate(
    entry,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter problem entries; search also covers the problem text."""
    view = entry.view
    search_fields = [view.horse.name, view.horse.tracking_id, entry.problem_text]
    return _horse_passes(view, filters, view.horse.status, search_fields)


def race_predicate(
    history: RaceHistory,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter race histories. Horse and owner match through participants."""
    race = history.race

    race_id = filters.id_value("race")
    if race_id is not None and race.id != race_id:
        return False

    if filters.status != ALL and race.status != filters.status:
        return False

    horse_id = filters.id_value("horse")
    if horse_id is not None and not any(
        p.participant.horse_id == horse_id for p in history.participants
    ):
        return False

    owner_id = filters.id_value("owner")
    if owner_id is not None and not any(
        p.owner is not None and p.owner.id == owner_id for p in history.participants
    ):
        return False

    if not filters.search_term:
        return True
    if matches_search([race.name, race.track, race.race_type], filters.search_term):
        return True
    return any(
        matches_search(
            [
                p.horse.name if p.horse else None,
                p.owner.name if p.owner else None,
                p.participant.jockey_name,
            ],
            filters.search_term,
        )
        for p in history.participants
    )


def owner_predicate(
    item: Owner | OwnerSummary,
    filters: FilterState,
    reference: FilterData | None = None,
) -> bool:
    """Filter owners or owner summaries."""
    owner = item.owner if isinstance(item, OwnerSummary) else item

    owner_id = filters.id_value("owner")
    if owner_id is not None and owner.id != owner_id:
        return False

    horse_id = filters.id_value("horse")
    if horse_id is not None and isinstance(item, OwnerSummary):
        if not any(h.id == horse_id for h in item.horses):
            return False

    return matches_search(
        [owner.name, owner.email, owner.phone, owner.address],
        filters.search_term,
    )


def apply_filters(
    items: Iterable[ItemT],
    filters: FilterState,
    predicate: Predicate,
    reference: FilterData | None = None,
) -> list[ItemT]:
    """Keep the items for which ``predicate`` holds, preserving order."""
    return [item for item in items if predicate(item, filters, reference)]

"""Read-only, id-keyed content tables loaded once from TOML.

The registry is constructed at startup (``ContentRegistry.load()``) and passed
to the engine functions that need it. Every cross reference between tables is
checked while loading so that a typo in a content file fails immediately
instead of surfacing as a silent empty drop list hours into a replay.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, TypeVar

import tomllib

from .config import SimConfig
from .models import (
    ContentError,
    DropTable,
    ExplorationActivityDef,
    ItemDef,
    Location,
    ModelValidationError,
    ObjectiveType,
    Quest,
    SessionType,
    Species,
    TrainingFacility,
    TrainingSession,
)

log = logging.getLogger(__name__)

DEFAULT_CONTENT_PATH = Path(__file__).resolve().parent / "data" / "content.toml"

T = TypeVar("T")


def _index(kind: str, items: Iterable[T], key: Callable[[T], str]) -> Mapping[str, T]:
    table: dict[str, T] = {}
    for item in items:
        item_id = key(item)
        if item_id in table:
            raise ContentError(kind, item_id, "defined more than once")
        table[item_id] = item
    return MappingProxyType(table)


@dataclass(frozen=True, slots=True)
class ContentRegistry:
    drop_tables: Mapping[str, DropTable]
    activities: Mapping[str, ExplorationActivityDef]
    facilities: Mapping[str, TrainingFacility]
    locations: Mapping[str, Location]
    quests: Mapping[str, Quest]
    items: Mapping[str, ItemDef]
    species_table: Mapping[str, Species]

    # Lookups return None for an unknown id; callers turn that into a
    # player-facing failure or raise via the ``require_*`` variants.

    def drop_table(self, table_id: str) -> DropTable | None:
        return self.drop_tables.get(table_id)

    def activity(self, activity_id: str) -> ExplorationActivityDef | None:
        return self.activities.get(activity_id)

    def facility(self, facility_id: str) -> TrainingFacility | None:
        return self.facilities.get(facility_id)

    def location(self, location_id: str) -> Location | None:
        return self.locations.get(location_id)

    def quest(self, quest_id: str) -> Quest | None:
        return self.quests.get(quest_id)

    def item(self, item_id: str) -> ItemDef | None:
        return self.items.get(item_id)

    def species(self, species_id: str) -> Species | None:
        return self.species_table.get(species_id)

    def require_drop_table(self, table_id: str) -> DropTable:
        table = self.drop_table(table_id)
        if table is None:
            raise ContentError("drop table", table_id)
        return table

    def require_activity(self, activity_id: str) -> ExplorationActivityDef:
        activity = self.activity(activity_id)
        if activity is None:
            raise ContentError("activity", activity_id)
        return activity

    def require_location(self, location_id: str) -> Location:
        location = self.location(location_id)
        if location is None:
            raise ContentError("location", location_id)
        return location

    def require_facility(self, facility_id: str) -> TrainingFacility:
        facility = self.facility(facility_id)
        if facility is None:
            raise ContentError("facility", facility_id)
        return facility

    def location_for_facility(self, facility_id: str) -> Location | None:
        for location in self.locations.values():
            if facility_id in location.facility_ids:
                return location
        return None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContentRegistry":
        """Build and cross-check a registry from parsed content data."""

        sessions: dict[SessionType, TrainingSession] = {}
        for key, payload in dict(data.get("training_sessions", {})).items():
            session = TrainingSession.from_mapping(key, payload)
            sessions[session.session_type] = session

        facilities = []
        for payload in data.get("facilities", ()):
            raw = dict(payload)
            offered = raw.pop("sessions", None)
            if offered is None:
                available = dict(sessions)
            else:
                available = {}
                for name in offered:
                    try:
                        session_type = SessionType.from_value(name)
                    except ValueError as exc:
                        raise ContentError("training session", str(name)) from exc
                    if session_type not in sessions:
                        raise ContentError(
                            "training session",
                            session_type.value,
                            f"offered by facility {raw.get('id')!r}",
                        )
                    available[session_type] = sessions[session_type]
            facilities.append(TrainingFacility.from_mapping(raw, available))

        registry = cls(
            drop_tables=_index(
                "drop table",
                (DropTable.from_mapping(item) for item in data.get("drop_tables", ())),
                lambda table: table.id,
            ),
            activities=_index(
                "activity",
                (
                    ExplorationActivityDef.from_mapping(item)
                    for item in data.get("activities", ())
                ),
                lambda activity: activity.id,
            ),
            facilities=_index("facility", facilities, lambda facility: facility.id),
            locations=_index(
                "location",
                (Location.from_mapping(item) for item in data.get("locations", ())),
                lambda location: location.id,
            ),
            quests=_index(
                "quest",
                (Quest.from_mapping(item) for item in data.get("quests", ())),
                lambda quest: quest.id,
            ),
            items=_index(
                "item",
                (ItemDef.from_mapping(item) for item in data.get("items", ())),
                lambda item: item.id,
            ),
            species_table=_index(
                "species",
                (Species.from_mapping(item) for item in data.get("species", ())),
                lambda species: species.id,
            ),
        )
        registry.check_references()
        return registry

    def check_references(self) -> None:
        """Raise :class:`ContentError` for the first dangling id found."""

        for table in self.drop_tables.values():
            for entry in table.entries:
                if entry.item_id not in self.items:
                    raise ContentError("item", entry.item_id, f"dropped by {table.id!r}")

        for location in self.locations.values():
            for connection in location.connections:
                if connection.target_id not in self.locations:
                    raise ContentError(
                        "location",
                        connection.target_id,
                        f"connected from {location.id!r}",
                    )
            for activity_id, table_ids in location.activities.items():
                if activity_id not in self.activities:
                    raise ContentError(
                        "activity", activity_id, f"offered at {location.id!r}"
                    )
                for table_id in table_ids:
                    if table_id not in self.drop_tables:
                        raise ContentError(
                            "drop table",
                            table_id,
                            f"bound to {location.id!r}/{activity_id!r}",
                        )
            for facility_id in location.facility_ids:
                if facility_id not in self.facilities:
                    raise ContentError(
                        "facility", facility_id, f"housed at {location.id!r}"
                    )

        for quest in self.quests.values():
            for objective in quest.objectives:
                known = {
                    ObjectiveType.COLLECT: self.items,
                    ObjectiveType.VISIT: self.locations,
                    ObjectiveType.EXPLORE: self.activities,
                    ObjectiveType.TRAIN: self.facilities,
                }[objective.type]
                if objective.target not in known:
                    raise ContentError(
                        objective.type.value + " target",
                        objective.target,
                        f"required by quest {quest.id!r}",
                    )
            for item_id in quest.reward_items:
                if item_id not in self.items:
                    raise ContentError("item", item_id, f"rewarded by {quest.id!r}")

    @classmethod
    def load(cls, path: Path | str | None = None) -> "ContentRegistry":
        """Load content from ``path`` (defaults to the bundled content pack)."""

        source = Path(path) if path is not None else DEFAULT_CONTENT_PATH
        try:
            with source.open("rb") as handle:
                data = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise ContentError("content file", str(source)) from exc
        except tomllib.TOMLDecodeError as exc:
            raise ContentError("content file", str(source), str(exc)) from exc

        try:
            registry = cls.from_mapping(data)
        except ModelValidationError:
            log.error("Invalid content definition in %s", source)
            raise
        log.info(
            "Loaded content from %s: %d locations, %d activities, %d drop tables, "
            "%d facilities, %d quests, %d items",
            source,
            len(registry.locations),
            len(registry.activities),
            len(registry.drop_tables),
            len(registry.facilities),
            len(registry.quests),
            len(registry.items),
        )
        return registry

    @classmethod
    def from_config(cls, config: SimConfig) -> "ContentRegistry":
        return cls.load(config.content_path)


__all__ = ["ContentRegistry", "DEFAULT_CONTENT_PATH"]

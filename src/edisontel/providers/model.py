"""Model provider: maps ``Edison:`` object identifiers to domain models.

The taxonomy is derived from the server's dictionary::

    Edison:board                  board root, composed of subsystems
      Edison:<subsystem>          composed of measurements
        Edison:<measurement>      carries a telemetry definition
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from edisontel.models.domain import DomainModel, RangeDefinition, TelemetryDefinition
from edisontel.models.telemetry import Dictionary, Measurement, Subsystem

if TYPE_CHECKING:
    from collections.abc import Iterable

    from edisontel.feed.adapter import TelemetryFeedAdapter

logger = logging.getLogger(__name__)

PREFIX = "Edison:"
ROOT_ID = "Edison:board"
SOURCE = "Edison.source"

BOARD_TYPE = "Edison.board"
SUBSYSTEM_TYPE = "Edison.subsystem"
MEASUREMENT_TYPE = "Edison.measurement"

# Measurement type in the dictionary -> host value format
_FORMAT_MAPPINGS: dict[str, str] = {
    "float": "number",
    "integer": "number",
    "string": "string",
}


def object_id(identifier: str) -> str:
    """Return the host object id for a dictionary *identifier*."""
    return f"{PREFIX}{identifier}"


def root_model(composition: list[str] | None = None) -> DomainModel:
    return DomainModel(type=BOARD_TYPE, name="Intel Edison", composition=composition or [])


def _measurement_model(measurement: Measurement) -> DomainModel:
    return DomainModel(
        type=MEASUREMENT_TYPE,
        name=measurement.name,
        telemetry=TelemetryDefinition(
            key=measurement.identifier,
            ranges=[
                RangeDefinition(
                    units=measurement.units,
                    format=_FORMAT_MAPPINGS.get(measurement.type or ""),
                )
            ],
        ),
    )


def _subsystem_model(subsystem: Subsystem) -> DomainModel:
    return DomainModel(
        type=SUBSYSTEM_TYPE,
        name=subsystem.name,
        composition=[object_id(m.identifier) for m in subsystem.measurements],
    )


def build_taxonomy(dictionary: Dictionary) -> dict[str, DomainModel]:
    """Build every domain model described by *dictionary*, keyed by object id."""
    models: dict[str, DomainModel] = {
        ROOT_ID: root_model([object_id(s.identifier) for s in dictionary.subsystems]),
    }
    for subsystem in dictionary.subsystems:
        models[object_id(subsystem.identifier)] = _subsystem_model(subsystem)
    for measurement in dictionary.measurements():
        models[object_id(measurement.identifier)] = _measurement_model(measurement)
    return models


async def load_dictionary(adapter: TelemetryFeedAdapter) -> Dictionary:
    """Await the adapter's dictionary and validate it.

    The adapter's future is shielded so a cancelled caller does not cancel
    the shared dictionary request.
    """
    raw = await asyncio.shield(adapter.get_dictionary())
    return Dictionary.model_validate(raw or {})


class ModelProvider:
    """Serves domain models for ``Edison:`` ids from the server dictionary."""

    def __init__(self, adapter: TelemetryFeedAdapter) -> None:
        self._adapter = adapter
        self._taxonomy: dict[str, DomainModel] | None = None

    async def get_models(self, ids: Iterable[str]) -> dict[str, DomainModel]:
        """Return models for the requested ids that belong to this source.

        Returns an empty dict without waiting on the server when none of
        the ids carry the ``Edison:`` prefix.
        """
        wanted = [i for i in ids if i.startswith(PREFIX)]
        if not wanted:
            return {}

        if self._taxonomy is None:
            self._taxonomy = build_taxonomy(await load_dictionary(self._adapter))
            logger.debug("Built taxonomy with %d models", len(self._taxonomy))

        return {i: self._taxonomy[i] for i in wanted if i in self._taxonomy}


async def initialize_root(adapter: TelemetryFeedAdapter, root: DomainModel) -> DomainModel:
    """Populate *root*'s composition with subsystem ids once the dictionary arrives."""
    dictionary = await load_dictionary(adapter)
    root.composition = [object_id(s.identifier) for s in dictionary.subsystems]
    logger.info("Board root populated with %d subsystems", len(root.composition))
    return root

"""Extension bundle describing the Edison telemetry source to the host.

The bundle is plain configuration data.  Implementations are referenced by
import path (``module:attribute``) so the host can resolve them however its
extension mechanism requires.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import BaseModel, Field

from edisontel.models.config import FeedSettings
from edisontel.providers.model import BOARD_TYPE, MEASUREMENT_TYPE, ROOT_ID, SOURCE, SUBSYSTEM_TYPE

logger = logging.getLogger(__name__)

BUNDLE_PATH = "telemetry"
ADAPTER_SERVICE = "Edison.adapter"
WS_URL_CONSTANT = "Edison_WS_URL"
FUTURE_FACTORY_SERVICE = "future_factory"


class ExtensionRegistry(Protocol):
    """Anything that accepts bundle definitions, e.g. the host's registry."""

    def register(self, path: str, definition: dict[str, Any]) -> None: ...


class TelemetryDomain(BaseModel):
    name: str
    key: str


class TypeTelemetry(BaseModel):
    source: str
    domains: list[TelemetryDomain] = Field(default_factory=list)


class TypeExtension(BaseModel):
    name: str
    key: str
    cssclass: str
    model: dict[str, Any] | None = None
    telemetry: TypeTelemetry | None = None


class RootExtension(BaseModel):
    id: str
    priority: str
    model: dict[str, Any]


class ServiceExtension(BaseModel):
    key: str
    implementation: str
    depends: list[str] = Field(default_factory=list)


class ConstantExtension(BaseModel):
    key: str
    priority: str
    value: Any


class RunExtension(BaseModel):
    implementation: str
    depends: list[str] = Field(default_factory=list)


class ComponentExtension(BaseModel):
    provides: str
    type: str
    implementation: str
    depends: list[str] = Field(default_factory=list)


class Extensions(BaseModel):
    types: list[TypeExtension] = Field(default_factory=list)
    roots: list[RootExtension] = Field(default_factory=list)
    services: list[ServiceExtension] = Field(default_factory=list)
    constants: list[ConstantExtension] = Field(default_factory=list)
    runs: list[RunExtension] = Field(default_factory=list)
    components: list[ComponentExtension] = Field(default_factory=list)


class Bundle(BaseModel):
    name: str
    extensions: Extensions

    def to_definition(self) -> dict[str, Any]:
        """Return the bundle as plain JSON-compatible data."""
        return self.model_dump(exclude_none=True)


def build_bundle(settings: FeedSettings | None = None) -> Bundle:
    """Build the Edison telemetry bundle.

    The ``Edison_WS_URL`` constant takes its value from *settings* (or the
    environment) and is registered at ``fallback`` priority so the host
    configuration can override it.
    """
    settings = settings or FeedSettings()
    return Bundle(
        name="Edison Telemetry Adapter",
        extensions=Extensions(
            types=[
                TypeExtension(name="Intel Edison", key=BOARD_TYPE, cssclass="icon-object"),
                TypeExtension(
                    name="Subsystem",
                    key=SUBSYSTEM_TYPE,
                    cssclass="icon-telemetry-panel",
                    model={"composition": []},
                ),
                TypeExtension(
                    name="Measurement",
                    key=MEASUREMENT_TYPE,
                    cssclass="icon-telemetry-panel",
                    model={"telemetry": {}},
                    telemetry=TypeTelemetry(
                        source=SOURCE,
                        domains=[TelemetryDomain(name="Time", key="timestamp")],
                    ),
                ),
            ],
            roots=[
                RootExtension(
                    id=ROOT_ID,
                    priority="preferred",
                    model={"type": BOARD_TYPE, "name": "Intel Edison", "composition": []},
                )
            ],
            services=[
                ServiceExtension(
                    key=ADAPTER_SERVICE,
                    implementation="edisontel.feed.adapter:TelemetryFeedAdapter",
                    depends=[WS_URL_CONSTANT, FUTURE_FACTORY_SERVICE],
                )
            ],
            constants=[
                ConstantExtension(key=WS_URL_CONSTANT, priority="fallback", value=settings.ws_url)
            ],
            runs=[
                # initialize_root takes the root model itself rather than an
                # object service to look it up in
                RunExtension(
                    implementation="edisontel.providers.model:initialize_root",
                    depends=[ADAPTER_SERVICE, ROOT_ID],
                )
            ],
            components=[
                ComponentExtension(
                    provides="modelService",
                    type="provider",
                    implementation="edisontel.providers.model:ModelProvider",
                    depends=[ADAPTER_SERVICE],
                ),
                ComponentExtension(
                    provides="telemetryService",
                    type="provider",
                    implementation="edisontel.providers.telemetry:TelemetryProvider",
                    depends=[ADAPTER_SERVICE],
                ),
            ],
        ),
    )


def register(registry: ExtensionRegistry, bundle: Bundle | None = None) -> Bundle:
    """Hand the bundle definition to *registry* under the ``telemetry`` path."""
    bundle = bundle or build_bundle()
    registry.register(BUNDLE_PATH, bundle.to_definition())
    logger.info("Registered bundle %r at %s", bundle.name, BUNDLE_PATH)
    return bundle

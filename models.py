# SPDX-License-Identifier: Apache-2.0
# This file was created or modified with the assistance of an AI (Large Language Model).
"""Input models and validation for trayfill project.yaml."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CATEGORY_KEYS = ("mv", "power", "vfd", "control")
SUPPORTED_BUNDLE_SPACING = {"0", "1D", "2D", "base"}


class ProjectMeta(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    note: str | None = None


class TrayModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    type: str | None = None
    purpose: str | None = None
    width_mm: float | None = None
    height_mm: float | None = None
    length_mm: float | None = None
    weight_kg_per_m: float | None = None

    @model_validator(mode="after")
    def validate_name(self) -> "TrayModel":
        if not self.name.strip():
            raise ValueError(f"tray {self.id} name must not be blank")
        return self


class CableModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    tag: str | None = None
    routing: str | None = None
    purpose: str | None = None
    diameter_mm: float | None = None
    weight_kg_per_m: float | None = None
    from_location: str | None = None
    to_location: str | None = None


class CategoryLayout(BaseModel):
    """Per-category overrides. Values are resolved leniently later on."""

    model_config = ConfigDict(extra="forbid")

    max_rows: float | None = None
    max_columns: float | None = None
    bundle_spacing: str | None = None
    trefoil: bool | None = None

    @field_validator("bundle_spacing", mode="before")
    @classmethod
    def coerce_bundle_spacing(cls, value: object) -> object:
        # YAML reads a bare 0 as an integer
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value


class CableLayout(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mv: CategoryLayout | None = None
    power: CategoryLayout | None = None
    vfd: CategoryLayout | None = None
    control: CategoryLayout | None = None
    cable_spacing: float | None = None
    consider_bundle_spacing_as_free: bool = False

    def for_category(self, category: str) -> CategoryLayout | None:
        if category not in CATEGORY_KEYS:
            raise ValueError(f"unknown cable category: {category!r}")
        return getattr(self, category)


class SupportSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    distance_m: float | None = None
    weight_kg: float | None = None


class DrawingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scale: float = Field(default=1.0, gt=0)
    spacing_mm: float | None = None


class SettingsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    layout: CableLayout = Field(default_factory=CableLayout)
    supports: SupportSettings = Field(default_factory=SupportSettings)
    drawing: DrawingSettings = Field(default_factory=DrawingSettings)


class ProjectInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = 1
    project: ProjectMeta
    trays: list[TrayModel]
    cables: list[CableModel] = Field(default_factory=list)
    settings: SettingsModel = Field(default_factory=SettingsModel)

    @model_validator(mode="after")
    def validate_references(self) -> "ProjectInput":
        tray_ids = [tray.id for tray in self.trays]
        if len(set(tray_ids)) != len(tray_ids):
            raise ValueError("tray ids must be unique")
        tray_names = [tray.name.strip().lower() for tray in self.trays]
        if len(set(tray_names)) != len(tray_names):
            raise ValueError("tray names must be unique (case-insensitive)")
        cable_ids = [cable.id for cable in self.cables]
        if len(set(cable_ids)) != len(cable_ids):
            raise ValueError("cable ids must be unique")
        return self

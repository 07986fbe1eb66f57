"""Unit records and the staging builder the config loader fills in.

A :class:`Unit` is frozen once built. The loader assembles one property at
a time through :class:`UnitBuilder`, which remembers which fields were set
explicitly so a second ``conv_factor = ...`` in the same section can be
reported instead of silently overwriting the first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, model_validator

UNIT_TYPES: tuple[str, ...] = (
    "area",
    "energy",
    "force",
    "fuel economy",
    "length",
    "mass",
    "power",
    "pressure",
    "speed",
    "temperature",
    "torque",
    "volume",
)

MAX_DIMENSIONS = 255


class Unit(BaseModel):
    """A named unit and the attributes the conversion pipeline needs.

    Attributes:
        name: Common name from the ``[Name]`` header. Always an alias too.
        conv_factor: Value of one unit expressed in the type's base unit.
        dimensions: Exponent applied to metric prefixes (2 for areas).
        inverse: Magnitude is reciprocal to the base unit (mpg vs L/100km).
        unit_type: Category; only units of the same type convert.
        zero_point: Additive offset for non-ratio scales.
        aliases: Every name the unit can be looked up by.
        tags: Namespaces the aliases register under. Empty means default.
    """

    model_config = {"frozen": True}

    name: str
    conv_factor: float
    unit_type: str
    dimensions: int = Field(default=1, ge=0, le=MAX_DIMENSIONS)
    inverse: bool = False
    zero_point: float = 0.0
    aliases: frozenset[str] = Field(default_factory=frozenset)
    tags: frozenset[str] = Field(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def _name_is_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "name" in data:
            aliases = frozenset(data.get("aliases") or ()) | {data["name"]}
            data = {**data, "aliases": aliases}
        return data

    @property
    def tagged(self) -> bool:
        return bool(self.tags)


@dataclass
class UnitBuilder:
    """Mutable staging area for a unit under construction.

    Every setter returns True when the value was taken and False when the
    field had already been set (the first value is kept).
    """

    name: str | None = None
    conv_factor: float | None = None
    unit_type: str | None = None
    dimensions: int | None = None
    inverse: bool | None = None
    zero_point: float | None = None
    aliases: list[str] | None = None
    tags: list[str] | None = None
    _explicit: set[str] = field(default_factory=set, repr=False)

    def _assign(self, name: str, value: object) -> bool:
        if name in self._explicit:
            return False
        setattr(self, name, value)
        self._explicit.add(name)
        return True

    def set_name(self, name: str) -> bool:
        return self._assign("name", name)

    def set_conv_factor(self, conv_factor: float) -> bool:
        return self._assign("conv_factor", conv_factor)

    def set_unit_type(self, unit_type: str) -> bool:
        return self._assign("unit_type", unit_type)

    def set_dimensions(self, dimensions: int) -> bool:
        return self._assign("dimensions", dimensions)

    def set_inverse(self, inverse: bool) -> bool:
        return self._assign("inverse", inverse)

    def set_zero_point(self, zero_point: float) -> bool:
        return self._assign("zero_point", zero_point)

    def set_aliases(self, aliases: list[str]) -> bool:
        return self._assign("aliases", list(aliases))

    def set_tags(self, tags: list[str]) -> bool:
        return self._assign("tags", list(tags))

    def is_set(self, name: str) -> bool:
        return name in self._explicit

    def missing(self) -> list[str]:
        """Mandatory properties not yet assigned."""
        return [
            prop
            for prop, attr in (("name", "name"), ("conv_factor", "conv_factor"), ("type", "unit_type"))
            if attr not in self._explicit
        ]

    def is_well_formed(self) -> bool:
        return not self.missing()

    def build(self) -> Unit:
        """Freeze the staged properties into a :class:`Unit`.

        Raises:
            ValueError: a mandatory property is missing.
        """
        missing = self.missing()
        if missing:
            msg = f"unit is missing mandatory properties: {', '.join(missing)}"
            raise ValueError(msg)
        assert self.name is not None
        assert self.conv_factor is not None
        assert self.unit_type is not None
        return Unit(
            name=self.name,
            conv_factor=self.conv_factor,
            unit_type=self.unit_type,
            dimensions=1 if self.dimensions is None else self.dimensions,
            inverse=bool(self.inverse),
            zero_point=0.0 if self.zero_point is None else self.zero_point,
            aliases=frozenset(self.aliases or ()),
            tags=frozenset(self.tags or ()),
        )

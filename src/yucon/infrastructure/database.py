"""UnitDatabase — tagged namespaces of aliases over an append-only unit list.

Units commonly reuse short aliases across regions or contexts (mass vs.
fluid ``oz``, US vs. imperial ``gal``), so aliases are unique per namespace
rather than globally. Untagged units live in the default namespace; tagged
units live exactly in their declared tags.

Resolution order for an untagged query:
  1. preferred namespace
  2. default namespace
  3. every other namespace in ascending lexical tag order

The order in step 3 depends on how tags are spelled. A tagged query looks
only in that tag's namespace.

INVARIANT: the database is never mutated after loading. Reloading builds a
new instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from yucon.domain.errors import UnitCollisionError
from yucon.domain.units import Unit

logger = logging.getLogger(__name__)

DEFAULT_TAG = "default"
PREFERRED_TAG = "us"


class UnitDatabase:
    """Alias lookup over units, partitioned by tag.

    Namespace maps hold indices into ``_units`` so a unit registered under
    several tags is stored once.
    """

    def __init__(self, *, default_tag: str = DEFAULT_TAG, preferred_tag: str = PREFERRED_TAG) -> None:
        self.default_tag = default_tag
        self.preferred_tag = preferred_tag
        self._units: list[Unit] = []
        self._namespaces: dict[str, dict[str, int]] = {default_tag: {}}

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def _namespaces_for(self, unit: Unit) -> list[str]:
        return sorted(unit.tags) if unit.tags else [self.default_tag]

    def find_collision(self, unit: Unit) -> tuple[str, str] | None:
        """Return the first ``(tag, alias)`` *unit* would collide on, if any."""
        for tag in self._namespaces_for(unit):
            namespace = self._namespaces.get(tag)
            if not namespace:
                continue
            if unit.name in namespace:
                return tag, unit.name
            for alias in sorted(unit.aliases):
                if alias in namespace:
                    return tag, alias
        return None

    def add(self, unit: Unit) -> None:
        """Register *unit* under all of its namespaces.

        Atomic: either every alias is registered in every namespace, or
        nothing changes.

        Raises:
            UnitCollisionError: an alias already exists in one of the
                unit's namespaces.
        """
        collision = self.find_collision(unit)
        if collision is not None:
            tag, alias = collision
            raise UnitCollisionError(tag, alias, unit.name)

        index = len(self._units)
        self._units.append(unit)
        for tag in self._namespaces_for(unit):
            namespace = self._namespaces.setdefault(tag, {})
            for alias in unit.aliases:
                namespace[alias] = index
        logger.debug("Registered unit %s under %s", unit.name, self._namespaces_for(unit))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _lookup(self, tag: str, name: str) -> Unit | None:
        namespace = self._namespaces.get(tag)
        if namespace is None:
            return None
        index = namespace.get(name)
        return None if index is None else self._units[index]

    def resolution_order(self) -> list[str]:
        """Namespaces in the order an untagged query searches them."""
        order = [self.preferred_tag]
        if self.default_tag != self.preferred_tag:
            order.append(self.default_tag)
        order.extend(tag for tag in sorted(self._namespaces) if tag not in order)
        return order

    def query(self, name: str, tag: str | None = None) -> Unit | None:
        """Find the unit called *name*.

        With *tag*, only that namespace is searched. Without it, the
        resolution order above applies and the first hit wins.
        """
        if tag is not None:
            return self._lookup(tag, name)
        for candidate in self.resolution_order():
            unit = self._lookup(candidate, name)
            if unit is not None:
                return unit
        return None

    @property
    def units(self) -> tuple[Unit, ...]:
        """All units in insertion order."""
        return tuple(self._units)

    def tags(self) -> list[str]:
        """Registered namespaces, sorted."""
        return sorted(self._namespaces)

    def units_in(self, tag: str) -> list[Unit]:
        """Distinct units registered under *tag*, in insertion order."""
        indices = sorted(set(self._namespaces.get(tag, {}).values()))
        return [self._units[i] for i in indices]

    def alias_index(self) -> frozenset[tuple[str, str]]:
        """Every ``(tag, alias)`` pair currently resolvable."""
        return frozenset(
            (tag, alias) for tag, namespace in self._namespaces.items() for alias in namespace
        )

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.query(name) is not None

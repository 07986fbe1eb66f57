"""Shared pytest fixtures and test helpers for yucon tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from yucon.infrastructure.database import UnitDatabase
from yucon.infrastructure.loader import LoadReport, load_units
from yucon.services.telemetry import disable_telemetry

# Small table covering every conversion feature: prefixes with dimensions,
# zero points, inverse units, and the same alias in several tags.
SAMPLE_UNITS = """\
# test units
[Millimeter]
aliases = mm
type = length
conv_factor = 1

[Centimeter]
aliases = cm
type = length
conv_factor = 10

[Meter]
aliases = meter, m
type = length
conv_factor = 1000

[Inch]
aliases = in
type = length
conv_factor = 25.4

[Foot]
aliases = ft
type = length
conv_factor = 304.8

[Square Meter]
aliases = m2
type = area
conv_factor = 10000
dimensions = 2

[Liter]
aliases = L, l
type = volume
conv_factor = 1000

[Milliliter]
aliases = ml
type = volume
conv_factor = 1

[Gallon (US)]
aliases = gal
type = volume
conv_factor = 3785.411784
tags = us

[Gallon (Imperial)]
aliases = gal
type = volume
conv_factor = 4546.09
tags = imperial

[Ounce]
aliases = oz
type = mass
conv_factor = 28.349523125

[Fluid Ounce (US)]
aliases = oz, floz
type = volume
conv_factor = 29.5735295625
tags = us

[Celsius]
aliases = C
type = temperature
conv_factor = 1
zero_point = 273.15

[Fahrenheit]
aliases = F
type = temperature
conv_factor = 0.5555555555555556
zero_point = 255.37222222222223

[Kelvin]
aliases = K
type = temperature
conv_factor = 1

[Liters per 100 km]
aliases = L/100km
type = fuel economy
conv_factor = 1

[Miles per Gallon]
aliases = mpg
type = fuel economy
conv_factor = 235.214583
inverse = 1
"""


@pytest.fixture
def sample_units() -> str:
    """Text of :data:`SAMPLE_UNITS`."""
    return SAMPLE_UNITS


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real ~/.yucon, yucon.toml, and YUCON_* vars."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for var in (
        "YUCON_CONFIG",
        "YUCON_VERBOSE",
        "YUCON_QUIET",
        "YUCON_JSON_OUTPUT",
        "YUCON_UNITS_PATH",
        "YUCON_OUTPUT__FORMAT",
        "YUCON_OUTPUT__PRECISION",
        "YUCON_UNITS__PATH",
        "YUCON_UNITS__PREFERRED_TAG",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_runtime_state() -> Iterator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    level = root.level
    yucon_level = logging.getLogger("yucon").level
    try:
        yield
    finally:
        for handler in root.handlers[:]:
            if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
                root.removeHandler(handler)
        root.setLevel(level)
        logging.getLogger("yucon").setLevel(yucon_level)
        disable_telemetry()


@pytest.fixture
def report() -> LoadReport:
    """Load report for :data:`SAMPLE_UNITS`."""
    return load_units(SAMPLE_UNITS.splitlines())


@pytest.fixture
def db(report: LoadReport) -> UnitDatabase:
    """Unit database built from :data:`SAMPLE_UNITS`."""
    assert report.ok, report.issues
    return report.database


@pytest.fixture
def units_file(tmp_path: Path) -> Path:
    """:data:`SAMPLE_UNITS` written to disk."""
    path = tmp_path / "units.cfg"
    path.write_text(SAMPLE_UNITS, encoding="utf-8")
    return path

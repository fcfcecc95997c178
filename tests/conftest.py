"""Shared test fixtures."""

from __future__ import annotations

import pytest

from svgmap.engine.config import LoaderConfig
from svgmap.engine.runtime import RecordingRuntime

SVG_NS = 'xmlns="http://www.w3.org/2000/svg"'

# One red 10-unit line, 2 units wide, square-ended.
SINGLE_STROKE_SVG = f"""<svg {SVG_NS} width="10" height="10">
  <path id="wall" style="fill:none;stroke:#ff0000;stroke-width:2;stroke-linecap:butt" d="M0,0 L10,0"/>
</svg>"""

# A filled 10x5 rectangle with no stroke.
FILLED_RECT_SVG = f"""<svg {SVG_NS}>
  <path id="floor" style="fill:#00ff00;stroke:none" d="M0,0 H10 V5 H0 Z"/>
</svg>"""

# Fill and stroke on one path, plus a second stroke-only path.
MIXED_SVG = f"""<svg {SVG_NS}>
  <path id="room" class="room" style="fill:#0000ff;stroke:#000000;stroke-width:1" d="M0,0 L20,0 L20,20 L0,20 Z"/>
  <path id="door" style="fill:none;stroke:#00ff00;stroke-width:1;stroke-linecap:butt" d="m 5,20 h 10"/>
</svg>"""

# Styles from presentation attributes and an ancestor group; defs are not drawn.
INHERITED_SVG = f"""<svg {SVG_NS}>
  <defs>
    <path id="template" style="stroke:#ffffff" d="M0,0 L1,1"/>
  </defs>
  <g stroke="#123456" stroke-width="3">
    <path id="a" fill="none" d="M0,0 L5,0"/>
    <path id="b" style="stroke:#654321" d="M0,5 L5,5"/>
  </g>
  <path id="bare" d="M1,1 L2,2"/>
</svg>"""

# The second path is malformed; the others must still load.
BROKEN_PATH_SVG = f"""<svg {SVG_NS}>
  <path id="ok1" style="fill:none;stroke:#000000" d="M0,0 L10,0"/>
  <path id="bad" style="fill:none;stroke:#000000" d="M0,0 L10"/>
  <path id="ok2" style="fill:none;stroke:#000000" d="M0,5 L10,5"/>
</svg>"""

# A path whose style has no stroke key at all.
MISSING_STROKE_SVG = f"""<svg {SVG_NS}>
  <path id="nostroke" style="fill:#ff0000" d="M0,0 L10,0 L10,10 Z"/>
</svg>"""


@pytest.fixture
def single_stroke_svg() -> str:
    return SINGLE_STROKE_SVG


@pytest.fixture
def filled_rect_svg() -> str:
    return FILLED_RECT_SVG


@pytest.fixture
def mixed_svg() -> str:
    return MIXED_SVG


@pytest.fixture
def inherited_svg() -> str:
    return INHERITED_SVG


@pytest.fixture
def broken_path_svg() -> str:
    return BROKEN_PATH_SVG


@pytest.fixture
def missing_stroke_svg() -> str:
    return MISSING_STROKE_SVG


@pytest.fixture
def runtime() -> RecordingRuntime:
    return RecordingRuntime()


@pytest.fixture
def identity_config() -> LoaderConfig:
    """Document coordinates pass through unchanged."""
    return LoaderConfig(center=False, flip_y=False)

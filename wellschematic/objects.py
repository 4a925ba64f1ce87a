from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class LayerType(Enum):
    TRAJECTORY: str = "Trajectory"
    VALUE: str = "Value"
    FILL: str = "Fill"
    PLUG: str = "Plug"
    PERFORATION: str = "Perforation"
    GUN: str = "Gun"

    @staticmethod
    def from_tag(tag) -> Optional['LayerType']:
        """
        Returns the layer type for a row's discriminant tag, which is matched
        case insensitively. Returns None for an unknown or missing tag.
        """
        if isinstance(tag, LayerType):
            return tag
        if not isinstance(tag, str):
            return None

        mapping = {
            layer_type.value.lower(): layer_type
            for layer_type in LayerType
        }

        return mapping.get(tag.strip().lower())


class MarkMode(str, Enum):
    """The marking operations passed back to the host with a row."""
    REPLACE = "Replace"
    TOGGLE = "Toggle"
    SUBTRACT = "Subtract"


class Waypoint(BaseModel):
    """
    A trajectory sample defining one borehole cross-section.

    Parameters
    ----------
    md: float
        The measured depth along the well path.
    tvd: float
        The true vertical depth, the absolute value is used for plotting.
    diameter: float
        The borehole diameter in the same unit as ``md``.
    """
    model_config = ConfigDict(frozen=True)

    md: float
    tvd: float
    diameter: float


class Feature(BaseModel):
    """
    Base class of the annotations anchored along the trajectory. ``row`` is
    an opaque reference to the source record, only ever handed back to the
    host for tooltips and marking.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    color: Optional[str] = None
    color_value: Any = None
    row: Any = None


class MDValue(Feature):
    md: float
    value: float


class MDFill(Feature):
    md: float


class Plug(Feature):
    md: float


class Perforation(Feature):
    """
    A perforated interval between ``start_md`` and ``end_md``. A
    perforation recorded at a single depth has ``start_md == end_md``.
    """
    start_md: float
    end_md: float

    @property
    def length(self) -> float:
        return abs(self.end_md - self.start_md)

    @property
    def is_point(self) -> bool:
        return self.start_md == self.end_md


class Gun(Feature):
    md: float


class Features(BaseModel):
    """
    The typed feature lists of a single draw, as returned by
    ``wellschematic.classify.classify``.
    """
    waypoints: List[Waypoint] = []
    values: List[MDValue] = []
    fills: List[MDFill] = []
    plugs: List[Plug] = []
    perforations: List[Perforation] = []
    guns: List[Gun] = []

    def __len__(self):
        return sum(
            len(v) for v in (
                self.waypoints, self.values, self.fills, self.plugs,
                self.perforations, self.guns
            )
        )

    def rows(self) -> list:
        """Returns the row handles of every markable feature."""
        return [
            feature.row for feature in (*self.values, *self.fills)
        ]


def sort_by_md(items: list) -> list:
    """Returns a new list of waypoints or features sorted by ascending md."""
    return sorted(items, key=lambda item: item.md)

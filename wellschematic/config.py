import os

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PATH = os.path.dirname(__file__)
DEFAULT_CONFIGURATION_FILENAME = os.path.join(
    '', *[PATH, 'data', 'default_configuration.yaml']
)


class _Model(BaseModel):
    # the host stores its configuration with camelCase keys
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


class Scales(_Model):
    tvd_scale_display: bool = True
    tvd_scale_grid_display: bool = True


class AxisRange(_Model):
    """A zoom window expressed as fractions of an axis' full extent."""
    range_from: float = Field(0., ge=0., le=1.)
    range_to: float = Field(1., ge=0., le=1.)

    @model_validator(mode='after')
    def _check_order(self):
        if self.range_from > self.range_to:
            raise ValueError(
                f"range_from ({self.range_from}) exceeds range_to "
                f"({self.range_to})"
            )
        return self


class ZoomRange(_Model):
    x: AxisRange = Field(default_factory=AxisRange)
    y: AxisRange = Field(default_factory=AxisRange)


class WellboreConfiguration(_Model):
    gun_width: float = Field(5., gt=0.)
    gun_color: str = 'purple'
    perforation_base_width: float = Field(5., gt=0.)
    perforation_color: str = 'dimgrey'
    perforation_length: float = Field(30., ge=0.)
    perforation_left: bool = True
    perforation_right: bool = True
    plug_color: str = 'black'
    plug_width: float = Field(10., gt=0.)
    scales: Scales = Field(default_factory=Scales)
    zoom_range: ZoomRange = Field(default_factory=ZoomRange)


class DiagramConfiguration(_Model):
    """
    The read-only parameters of a draw.

    Examples
    --------
    Keys can be given in the host's camelCase or in snake_case:

    >>> config = DiagramConfiguration.model_validate(
    ...     {'wellbore': {'plugWidth': 20, 'perforation_left': False}}
    ... )
    >>> config.wellbore.plug_width, config.wellbore.perforation_left
    (20.0, False)
    """
    row_limit: int = Field(1000, ge=0)
    show_tooltips: bool = True
    show_zoom_x: bool = False
    show_zoom_y: bool = False
    wellbore: WellboreConfiguration = Field(
        default_factory=WellboreConfiguration
    )

    def to_dict(self) -> dict:
        """Returns the configuration with the host's camelCase keys."""
        return self.model_dump(by_alias=True)


def _camelize(data):
    if not isinstance(data, dict):
        return data
    return {
        (to_camel(k) if '_' in k else k): _camelize(v)
        for k, v in data.items()
    }


def _merge(base: dict, overrides: dict) -> dict:
    merged = dict(base)
    for k, v in _camelize(overrides).items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _merge(merged[k], v)
        else:
            merged[k] = v
    return merged


def get_default_configuration() -> dict:
    with open(DEFAULT_CONFIGURATION_FILENAME, 'r') as f:
        data = yaml.safe_load(f)
    return data


def load_configuration(filename=None, **overrides) -> DiagramConfiguration:
    """
    Loads a diagram configuration.

    Parameters
    ----------
    filename: str (default: None)
        Path to a YAML (or JSON, which is valid YAML) file of configuration
        values. Missing keys take the packaged defaults.
    overrides:
        Top level keys overriding both the defaults and the file, e.g.
        ``wellbore={'plugWidth': 20}``. Nested dicts are merged.

    Returns
    -------
    configuration: DiagramConfiguration

    Raises
    ------
    pydantic.ValidationError
        If a value is out of bounds, e.g. a negative plug width.
    """
    data = get_default_configuration()

    if filename is not None:
        with open(filename, 'r') as f:
            data = _merge(data, yaml.safe_load(f) or {})

    data = _merge(data, overrides)

    return DiagramConfiguration.model_validate(data)

from . import (
    classify,
    config,
    diagram,
    exceptions,
    geometry,
    log,
    mapper,
    objects,
    polygon,
    units,
    utils,
    visual,
)
from .version import __version__

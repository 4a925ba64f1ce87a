import numpy as np
from pint import UnitRegistry

ureg = UnitRegistry()
Q_ = ureg.Quantity

UNITS = {
    'm': 'meter',
    'meters': 'meter',
    'meter': 'meter',
    'ft': 'foot',
    'feet': 'foot',
    'foot': 'foot',
    'in': 'inch',
    'inch': 'inch',
    'inches': 'inch',
    'cm': 'centimeter',
    'mm': 'millimeter',
}


def get_unit(unit):
    """
    Returns the ``pint`` name of a depth or diameter unit abbreviation, e.g.
    ``"ft"`` returns ``"foot"``. Unknown units are passed through for
    ``pint`` to resolve.
    """
    if unit is None:
        return None
    return UNITS.get(unit.lower(), unit)


def convert(data, from_unit, to_unit):
    """
    Convert a scalar or array of lengths between units.

    Parameters
    ----------
    data: float or array of floats
        The lengths to convert. ``None`` and ``nan`` values are preserved.
    from_unit: str
        The unit of ``data``, e.g. ``"in"``.
    to_unit: str
        The desired unit, e.g. ``"m"``.

    Returns
    -------
    converted: float or array of floats

    Example
    -------
    Convert a 12 1/4" hole size to meters:

    >>> from wellschematic.units import convert
    >>> round(convert(12.25, 'in', 'm'), 5)
    0.31115
    """
    from_unit, to_unit = get_unit(from_unit), get_unit(to_unit)
    if data is None or from_unit is None or to_unit is None:
        return data
    if from_unit == to_unit:
        return data

    factor = Q_(1.0, from_unit).to(to_unit).m

    return linear_convert(data, factor)


def linear_convert(data, factor):
    if isinstance(data, np.ndarray):
        return data * factor
    flag = False
    if not isinstance(data, list):
        flag = True
        data = [data]
    converted = [d * factor if d is not None else None for d in data]
    if flag:
        return converted[0]
    else:
        return converted

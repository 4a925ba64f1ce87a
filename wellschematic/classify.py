import logging
import math
import numbers
import re
from typing import Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import RowLimitError
from .objects import (
    Features,
    Gun,
    LayerType,
    MDFill,
    MDValue,
    Perforation,
    Plug,
    Waypoint,
    sort_by_md,
)
from .units import convert

logger = logging.getLogger(__name__)

REQUIRED = {
    LayerType.TRAJECTORY: ('md', 'tvd', 'diameter'),
    LayerType.VALUE: ('md', 'value'),
    LayerType.FILL: ('md',),
    LayerType.PLUG: ('md',),
    LayerType.PERFORATION: ('start_md', 'end_md'),
    LayerType.GUN: ('md',),
}


def normalize_key(key: str) -> str:
    """
    Converts a record key or column name to snake_case, e.g.
    ``'layerType'``, ``'Layer Type'`` and ``'layer_type'`` all return
    ``'layer_type'`` and ``'startMD'`` returns ``'start_md'``.
    """
    key = re.sub(r'[\s\-]+', '_', str(key).strip())
    key = re.sub(r'(?<=[a-z0-9])([A-Z])', r'_\1', key)
    return key.lower()


def is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return math.isnan(value)
    return False


def _has(record: Mapping, keys: Sequence[str]) -> bool:
    return all(not is_missing(record.get(key)) for key in keys)


def _make_feature(layer_type: LayerType, record: Mapping, row):
    params = dict(
        color=None if is_missing(record.get('color')) else record['color'],
        color_value=record.get('color_value'),
        row=row
    )

    if layer_type is LayerType.PERFORATION and not _has(
        record, REQUIRED[layer_type]
    ):
        # single md perforation
        if not _has(record, ('md',)):
            return None
        return Perforation(
            start_md=record['md'], end_md=record['md'], **params
        )

    if not _has(record, REQUIRED[layer_type]):
        return None

    if layer_type is LayerType.TRAJECTORY:
        return Waypoint(
            md=record['md'], tvd=record['tvd'], diameter=record['diameter']
        )
    elif layer_type is LayerType.VALUE:
        return MDValue(md=record['md'], value=record['value'], **params)
    elif layer_type is LayerType.FILL:
        return MDFill(md=record['md'], **params)
    elif layer_type is LayerType.PLUG:
        return Plug(md=record['md'], **params)
    elif layer_type is LayerType.PERFORATION:
        return Perforation(
            start_md=record['start_md'], end_md=record['end_md'], **params
        )
    elif layer_type is LayerType.GUN:
        return Gun(md=record['md'], **params)


def coalesce_waypoints(
    waypoints: Sequence[Waypoint], decimals: int = 4
) -> List[Waypoint]:
    """
    Sorts waypoints by md and removes duplicates, keeping the first waypoint
    of each run of equal mds (compared after rounding to ``decimals``).
    """
    waypoints = sort_by_md(waypoints)
    if len(waypoints) < 2:
        return waypoints

    md = np.round(np.array([w.md for w in waypoints]), decimals)
    keep = np.concatenate(([True], md[1:] != md[:-1]))

    if not np.all(keep):
        logger.warning(
            "Removed %d waypoint(s) with duplicate md",
            int(np.sum(~keep))
        )

    return [w for w, k in zip(waypoints, keep) if k]


def classify(
    records: Iterable[Mapping], coalesce: bool = True
) -> Features:
    """
    Partitions a flat list of records into typed feature lists.

    Parameters
    ----------
    records: list of dicts
        Each record carries a ``layer_type`` tag (one of ``Trajectory``,
        ``Value``, ``Fill``, ``Plug``, ``Perforation`` or ``Gun``) and the
        fields required for that type. Keys may be snake_case or the host's
        camelCase (``layerType``, ``startMD``, ``colorValue``). An optional
        ``row`` key gives the row handle, otherwise the record itself is
        used.
    coalesce: bool (default: True)
        If True, waypoints with duplicate mds are removed.

    Returns
    -------
    features: Features
        Records with an unknown tag or missing a required field are dropped.
        Perforations recorded with only an ``md`` become point perforations.

    Examples
    --------
    >>> features = classify([
    ...     {'layerType': 'Trajectory', 'md': 0, 'tvd': 0, 'diameter': 10},
    ...     {'layerType': 'Trajectory', 'md': 100, 'tvd': 90, 'diameter': 10},
    ...     {'layerType': 'Plug', 'md': 50},
    ...     {'layerType': 'Value', 'md': 50},  # no value, dropped
    ... ])
    >>> len(features.waypoints), len(features.plugs), len(features.values)
    (2, 1, 0)
    """
    features = Features()
    lists = {
        LayerType.TRAJECTORY: features.waypoints,
        LayerType.VALUE: features.values,
        LayerType.FILL: features.fills,
        LayerType.PLUG: features.plugs,
        LayerType.PERFORATION: features.perforations,
        LayerType.GUN: features.guns,
    }

    dropped = 0
    for record in records:
        data = {normalize_key(k): v for k, v in record.items()}
        row = data.get('row', record)

        layer_type = LayerType.from_tag(data.get('layer_type'))
        if layer_type is None:
            dropped += 1
            continue

        feature = _make_feature(layer_type, data, row)
        if feature is None:
            dropped += 1
            continue

        lists[layer_type].append(feature)

    if dropped:
        logger.debug("Dropped %d record(s) missing required fields", dropped)

    if coalesce:
        features.waypoints[:] = coalesce_waypoints(features.waypoints)

    return features


def check_row_limit(records: Sequence, row_limit: int) -> None:
    """
    Raises
    ------
    RowLimitError
        If there are more records than ``row_limit``.
    """
    if len(records) > row_limit:
        raise RowLimitError(len(records), row_limit)


def records_from_dataframe(
    df: pd.DataFrame,
    columns: Optional[Mapping[str, str]] = None,
    depth_unit: Optional[str] = None,
    diameter_unit: Optional[str] = None,
) -> List[dict]:
    """
    Converts the rows of a DataFrame into records for ``classify``.

    Parameters
    ----------
    df: pd.DataFrame
        One row per record. Column names are normalized, so ``'Layer Type'``,
        ``'layerType'`` and ``'layer_type'`` are all recognized.
    columns: dict (default: None)
        Optional mapping of column names to record keys, e.g.
        ``{'Hole Size': 'diameter'}``.
    depth_unit: str (default: None)
        The unit of the md and tvd columns, e.g. ``'m'``.
    diameter_unit: str (default: None)
        The unit of the diameter column, e.g. ``'in'``. If both units are
        given, diameters are converted to the depth unit.

    Returns
    -------
    records: list of dicts
        Missing values are None and each record's ``row`` is the index label
        of its row.
    """
    if columns:
        df = df.rename(columns=columns)

    records = []
    for label, values in zip(df.index, df.to_dict(orient='records')):
        record = {
            normalize_key(k): (None if is_missing(v) else v)
            for k, v in values.items()
        }
        record.setdefault('row', label)

        if depth_unit and diameter_unit and record.get('diameter') is not None:
            record['diameter'] = convert(
                record['diameter'], diameter_unit, depth_unit
            )

        records.append(record)

    return records

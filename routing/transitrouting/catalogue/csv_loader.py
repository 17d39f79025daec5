"""
Load a transit network from CSV tables.

Expected files in the data directory:

- ``stops.csv``: name, latitude, longitude
- ``line_stops.csv``: line, is_roundtrip, sequence, stop
- ``distances.csv`` (optional): from_stop, to_stop, meters
"""

import logging
import os

import pandas as pd

from ..exceptions import RequestFormatError
from ..models.domain import Coordinates
from .transit_network import TransitNetwork

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 'true', 'yes', 'y', 't'}


def _parse_flag(value) -> bool:
    if pd.isnull(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


def _read_table(path: str, required_columns) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype=str, skipinitialspace=True)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise RequestFormatError(f"Failed to read {path}: {e}") from e
    missing = set(required_columns) - set(df.columns)
    if missing:
        raise RequestFormatError(f"{os.path.basename(path)} is missing columns: {sorted(missing)}")
    return df


def load_network_from_csv(data_dir: str, network: TransitNetwork = None) -> TransitNetwork:
    """Load stops, then distances, then bus lines from `data_dir`"""
    network = network if network is not None else TransitNetwork()
    logger.info(f"Loading transit network tables from {data_dir}...")

    # Load stops
    stops_df = _read_table(os.path.join(data_dir, 'stops.csv'), ['name', 'latitude', 'longitude'])
    # Non-numeric coordinates become NaN and the row is skipped below
    stops_df[['latitude', 'longitude']] = stops_df[['latitude', 'longitude']].apply(pd.to_numeric, errors='coerce')
    for _, row in stops_df.iterrows():
        if pd.isnull(row['name']) or pd.isnull(row['latitude']) or pd.isnull(row['longitude']):
            logger.warning(f"Invalid stop row: {row.to_dict()}")
            continue
        network.add_stop(str(row['name']), Coordinates(lat=float(row['latitude']), lng=float(row['longitude'])))

    # Load distances
    distances_path = os.path.join(data_dir, 'distances.csv')
    distance_count = 0
    if os.path.exists(distances_path):
        distances_df = _read_table(distances_path, ['from_stop', 'to_stop', 'meters'])
        distances_df['meters'] = pd.to_numeric(distances_df['meters'], errors='coerce')
        for _, row in distances_df.iterrows():
            if row[['from_stop', 'to_stop', 'meters']].isnull().any():
                logger.warning(f"Invalid distance row: {row.to_dict()}")
                continue
            if network.set_distance(str(row['from_stop']), str(row['to_stop']), float(row['meters'])):
                distance_count += 1
    else:
        logger.warning(f"{distances_path} not found, all road distances default to 0")

    # Load bus lines, ordered by sequence within each line
    line_stops_df = _read_table(os.path.join(data_dir, 'line_stops.csv'),
                                ['line', 'is_roundtrip', 'sequence', 'stop'])
    line_stops_df = line_stops_df.dropna(subset=['line', 'sequence', 'stop']).copy()
    try:
        line_stops_df['sequence'] = pd.to_numeric(line_stops_df['sequence'])
    except ValueError as e:
        raise RequestFormatError(f"Non-numeric stop sequence in line_stops.csv: {e}") from e
    line_count = 0
    for line_name, group in line_stops_df.sort_values(['line', 'sequence'], kind='stable').groupby('line', sort=False):
        is_round_trip = _parse_flag(group['is_roundtrip'].iloc[0])
        network.add_bus_line(line_name, group['stop'].tolist(), is_round_trip)
        line_count += 1

    logger.info(f"Loaded {len(network)} stops, {line_count} bus lines, {distance_count} road distances")
    return network

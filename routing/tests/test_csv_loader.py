import pytest

from transitrouting.catalogue.csv_loader import load_network_from_csv
from transitrouting.exceptions import RequestFormatError


def _write(path, text):
    path.write_text(text.strip() + '\n', encoding='utf-8')


@pytest.fixture
def data_dir(tmp_path):
    _write(tmp_path / 'stops.csv', """
name,latitude,longitude
A,55.611087,37.20829
B,55.595884,37.209755
C,55.632761,37.333324
Broken,,37.0
""")
    _write(tmp_path / 'line_stops.csv', """
line,is_roundtrip,sequence,stop
1,false,2,B
1,false,1,A
1,false,3,C
ring,true,1,A
ring,true,2,C
ring,true,3,A
""")
    _write(tmp_path / 'distances.csv', """
from_stop,to_stop,meters
A,B,1000
B,C,2000
C,A,4000
A,Nowhere,10
""")
    return tmp_path


def test_loads_stops_lines_and_distances(data_dir):
    network = load_network_from_csv(str(data_dir))
    assert len(network) == 3
    assert network.find_stop('Broken') is None
    assert network.get_distance('A', 'B') == 1000

    line = network.find_bus_line('1')
    assert network.stop_names(line) == ['A', 'B', 'C', 'B', 'A']
    assert not line.is_round_trip

    ring = network.find_bus_line('ring')
    assert ring.is_round_trip
    assert network.get_line_statistics('ring').route_length == pytest.approx(8000)
    assert network.get_buses_serving_stop('A') == ['1', 'ring']


def test_distances_file_is_optional(data_dir):
    (data_dir / 'distances.csv').unlink()
    network = load_network_from_csv(str(data_dir))
    assert network.get_line_statistics('1').route_length == 0


def test_missing_columns(data_dir):
    _write(data_dir / 'stops.csv', """
name,lat
A,55.6
""")
    with pytest.raises(RequestFormatError):
        load_network_from_csv(str(data_dir))


def test_missing_stops_file(tmp_path):
    with pytest.raises(RequestFormatError):
        load_network_from_csv(str(tmp_path))


def test_non_numeric_cells_are_skipped(data_dir):
    _write(data_dir / 'stops.csv', """
name,latitude,longitude
A,55.611087,37.20829
B,55.595884,37.209755
C,55.632761,37.333324
X,abc,37
""")
    _write(data_dir / 'distances.csv', """
from_stop,to_stop,meters
A,B,far
B,C,2000
""")
    network = load_network_from_csv(str(data_dir))
    assert network.find_stop('X') is None
    assert len(network) == 3
    assert network.get_distance('A', 'B') == 0.0
    assert network.get_distance('B', 'C') == 2000

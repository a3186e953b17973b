import pytest

from stormpanel.config import PipelineConfig
from stormpanel.source import iter_lines

NO_RADII = (-999,) * 12


def _data_line(date="19800101", time="0000", record="", status="TS",
               lat="28.5N", lon="79.0W", wind=10, pressure=-999,
               radii=NO_RADII, rmw=None):
    fields = [date, time, record, status, lat, lon, str(wind), str(pressure)]
    fields += [str(r) for r in radii]
    if rmw is not None:
        fields.append(str(rmw))
    return ", ".join(f"{f:>4}" for f in fields) + ","


def _header(storm_id, name, n):
    return f"{storm_id}, {name:>18}, {n:>6},"


@pytest.fixture
def data_line():
    return _data_line


@pytest.fixture
def header():
    return _header


@pytest.fixture
def example_text():
    """Header plus two fixes of one storm on 1980-01-01."""
    return [
        _header("AL011980", "TEST", 2),
        _data_line(time="0000", status="TD", lat="28.5N", lon="079.0W", wind=10),
        _data_line(time="0600", status="HU", lat="29.0N", lon="080.0W", wind=60),
    ]


@pytest.fixture
def to_lines():
    return lambda text: list(iter_lines(text))


@pytest.fixture
def write_archive(tmp_path):
    def _write(text, name="hurdat2.txt"):
        path = tmp_path / name
        path.write_text("\n".join(text) + "\n", encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def config(tmp_path):
    return PipelineConfig(root=tmp_path / "run")

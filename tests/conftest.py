import pytest

from tests.fake.fake_source import FakeSource

from resumable.bootstrap import deps
from resumable.bootstrap.config.loader import get_configfile
from resumable.core.stream import ResumableStream
from resumable.infra.sinks.memory import MemorySink


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def stream(source):
    return ResumableStream(source)


@pytest.fixture
def sink():
    return MemorySink(high_water_mark=1000)


@pytest.fixture
def received(stream):
    """Every notification delivered by `stream`, as (event, *args) tuples."""
    events = []
    stream.on("data", lambda payload: events.append(("data", payload)))
    stream.on("end", lambda: events.append(("end",)))
    stream.on("error", lambda exc: events.append(("error", exc)))
    return events


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("RESUMABLE_CONFIG", "RESUMABLE_CHUNK_SIZE", "RESUMABLE_HIGH_WATER_MARK", "RESUMABLE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    get_configfile.cache_clear()
    deps.get_settings.cache_clear()
    yield
    get_configfile.cache_clear()
    deps.get_settings.cache_clear()

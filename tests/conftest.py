import io

import pytest

import meterline


class RecordingStream(io.StringIO):
    """StringIO keeping every write call separately"""

    def __init__(self):
        super().__init__()
        self.writes = []

    def write(self, data):
        self.writes.append(data)
        return super().write(data)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture(autouse=True)
def no_terminal(monkeypatch):
    monkeypatch.setattr(meterline, '_get_terminal_columns', lambda: 0)


@pytest.fixture
def sink():
    return RecordingStream()


@pytest.fixture
def coordinator(sink):
    return meterline.Coordinator(stream=sink)


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(meterline, '_now', fake)
    return fake

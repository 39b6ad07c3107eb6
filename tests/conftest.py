from datetime import datetime, timedelta, timezone

import pytest

from rhelswap.models import DiskRecord, InstanceRecord

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    """Wall clock for the cache, advanced by hand."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeTimer:
    """Monotonic clock plus sleep for the updater; sleeping advances the clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def torn_write(path, data):
    """Replacement for Path.write_bytes that fails after writing 10 bytes."""
    with open(path, "wb") as fh:
        fh.write(data[:10])
    raise OSError(28, "No space left on device")


def make_instance(name: str, zone: str = "us-central1-a", status: str = "RUNNING", licenses=None):
    return InstanceRecord(
        id=str(abs(hash(name)) % 10**8),
        name=name,
        zone=zone,
        machine_type="n2-standard-2",
        status=status,
        creation_timestamp="2023-05-01T10:00:00.000-07:00",
        disks=[
            DiskRecord(
                device_name="persistent-disk-0",
                source=f"https://www.googleapis.com/compute/v1/projects/p1/zones/{zone}/disks/{name}",
                licenses=list(licenses or []),
            )
        ],
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer():
    return FakeTimer()

import threading
from datetime import timezone

from src.core.activity import ActivityLog


def test_entries_are_ordered_and_timestamped():
    log = ActivityLog()
    first = log.append("one")
    log.append("two")
    entries = log.entries()
    assert [e.message for e in entries] == ["one", "two"]
    assert entries[0] == first
    assert first.timestamp.tzinfo == timezone.utc
    assert entries[0].timestamp <= entries[1].timestamp
    assert first.render().endswith("] one")


def test_entries_returns_a_copy():
    log = ActivityLog()
    log.append("one")
    log.entries().clear()
    assert len(log) == 1


def test_clear():
    log = ActivityLog()
    log.append("one")
    log.clear()
    assert log.entries() == []
    assert len(log) == 0


def test_concurrent_appends_are_not_lost():
    log = ActivityLog()

    def writer(n):
        for i in range(200):
            log.append(f"{n}-{i}")

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(log) == 800
    for n in range(4):
        mine = [e.message for e in log.entries() if e.message.startswith(f"{n}-")]
        assert mine == [f"{n}-{i}" for i in range(200)]


def test_concurrent_appends_keep_timestamp_order():
    log = ActivityLog()
    threads = [threading.Thread(target=lambda: [log.append("x") for _ in range(300)]) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    stamps = [e.timestamp for e in log.entries()]
    assert stamps == sorted(stamps)

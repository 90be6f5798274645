from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from src.catering_system.catering_system.container import build_container
from src.catering_system.catering_system.database.memory_store import KeyedLocks, MemoryStore


def test_lock_entry_is_dropped_after_release():
    locks = KeyedLocks()

    with locks.hold(("cancellation", 1, 1)):
        assert len(locks) == 1
    assert len(locks) == 0


def test_same_key_is_exclusive_and_cleaned_up():
    locks = KeyedLocks()
    inside = 0
    peak = 0
    guard = threading.Lock()

    def work(_):
        nonlocal inside, peak
        with locks.hold("k"):
            with guard:
                inside += 1
                peak = max(peak, inside)
            time.sleep(0.001)
            with guard:
                inside -= 1

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(work, range(40)))

    assert peak == 1
    assert len(locks) == 0


def test_cancellation_keys_do_not_accumulate(fixed_now):
    store = MemoryStore()
    container = build_container(store=store, clock=lambda: fixed_now)
    c = container.catering_service.create_catering(
        name="Lunch",
        start_date="2025-10-01",
        end_date="2025-10-31",
        meals=["Lunch"],
        active_weekdays=["Mon", "Tue", "Wed", "Thu", "Fri"],
        cutoff_time="08:00",
    )
    kid = container.student_service.add_student(group_id=c.root_group_id, first_name="Ana", last_name="Novak")

    container.cancellation_service.cancel_range(
        student_id=kid.student_id, catering_id=c.catering_id, start="2025-10-01", end="2025-10-31"
    )

    assert len(store.cancellations) == 23
    assert len(store.keys) == 0

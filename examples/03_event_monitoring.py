#!/usr/bin/env python3
"""
03_event_monitoring.py - Observe every pool event and drain the pool

Demonstrates: wildcard subscriptions, drain(), kill() on a single worker
"""
import asyncio
from pathlib import Path

from crew import Pool, PoolConfig
from crew.events import PoolEvent

WORKERS = Path(__file__).parent / "workers"


def log_event(event: PoolEvent) -> None:
    fields = event.model_dump(exclude={"event_type", "occurred_at"})
    print(f"{event.event_type:<16} {fields}")


async def main() -> None:
    pool = Pool(PoolConfig(max_procs=2, oversubscribe=True))
    pool.on("*", log_event)

    sleeper = await pool.submit({"path": WORKERS / "sleeper.py"})
    await pool.submit({"path": WORKERS / "square.py", "data": 3})
    await pool.submit({"path": WORKERS / "square.py", "data": 4})

    # Nothing new is admitted until both running workers are gone.
    pool.drain()
    await asyncio.sleep(1)
    await sleeper.kill()

    print(f"exit status {await pool.wait_closed()}")


if __name__ == "__main__":
    asyncio.run(main())

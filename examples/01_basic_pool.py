#!/usr/bin/env python3
"""
01_basic_pool.py - Run several workers through a bounded pool

Demonstrates: FIFO admission with max_procs=2, initial data, worker messages
"""
import asyncio
from pathlib import Path

from crew import Pool, PoolConfig

WORKERS = Path(__file__).parent / "workers"


async def main() -> None:
    pool = Pool(PoolConfig(max_procs=2, oversubscribe=True))
    pool.on("pool.admitted", lambda e: print(f"admitted {e.uid} ({e.active_count} active)"))

    for n in range(6):
        await pool.submit(
            {
                "path": WORKERS / "square.py",
                "data": n,
                "on_message": lambda e: print(f"worker {e.uid}: {e.message}"),
            }
        )

    status = await pool.wait_closed()
    outcomes = pool.get_outcomes()
    print(f"{len(outcomes.completed)} completed, exit status {status}")


if __name__ == "__main__":
    asyncio.run(main())

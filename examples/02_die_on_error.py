#!/usr/bin/env python3
"""
02_die_on_error.py - A failing worker takes the pool down

Demonstrates: die_on_error, killed peers, queued workers that never run and
the outcome cache. The script expects the pool to exit with status 1.
"""
import asyncio
import sys
from pathlib import Path

from crew import Pool, PoolConfig

WORKERS = Path(__file__).parent / "workers"


async def main() -> int:
    pool = Pool(PoolConfig(max_procs=2, oversubscribe=True, die_on_error=True))
    pool.on("pool.dying", lambda e: print(f"dying: {e.reason}"))

    await pool.submit({"path": WORKERS / "sleeper.py"})
    await pool.submit({"path": WORKERS / "fail.py"})
    never = await pool.submit({"path": WORKERS / "square.py", "data": 1})

    status = await pool.wait_closed()
    for record in pool.get_outcomes().errors:
        print(f"{Path(record.path).name}: {record.error.message}")
    print(f"queued worker state: {never.state}, exit status {status}")
    return 0 if status == 1 else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

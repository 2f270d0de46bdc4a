"""Worker script: squares the number it receives and reports it back."""

import time

from crew import child

n = child.receive(default=0)
time.sleep(0.2)
child.send({"n": n, "square": n * n})

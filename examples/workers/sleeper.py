"""Worker script: runs until killed."""

import time

while True:
    time.sleep(1)

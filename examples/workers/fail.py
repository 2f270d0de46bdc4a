"""Worker script: exits with code 4 (Evaluation Failure)."""

import sys

from crew import child

child.send("about to fail")
sys.exit(4)

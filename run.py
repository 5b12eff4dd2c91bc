"""
Entry point for the BigBlueButton stress test.

    python run.py <meeting_id> --camera 1 --listen 10 --duration 120
"""

import sys
import os

# Add the current directory to sys.path
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from bbb_stress.main import run


if __name__ == "__main__":
    run()

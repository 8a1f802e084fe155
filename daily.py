#!/usr/bin/env python3
"""
daily CLI

Track today's tasks, time spent on them, and progress against an
8-hour work budget.

Usage:
    ./daily.py add "Write report" 60         # Plan a task for today
    ./daily.py ls                            # Show today's plan and progress
    ./daily.py next --start                  # Start the next pending task
    ./daily.py finish                        # Mark the running task done

Examples:
    # Plan tomorrow
    ./daily.py add "Review PRs" 45 --tomorrow
    ./daily.py ls --tomorrow

    # Pause the running task, then resume task 2
    ./daily.py stop
    ./daily.py status 2 started

    # Jot a note, or edit today's notes in $EDITOR
    ./daily.py note called the vendor back
    ./daily.py note edit
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from daily_manager import main

if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""RepClock — entry point.

Run with:
    python main.py [plan.json]
    python -m repclock [plan.json]
"""

from repclock.__main__ import main


if __name__ == "__main__":
    main()

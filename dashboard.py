#!/usr/bin/env python3
"""
Launcher script for the Aviary terminal dashboard.

Usage:
  python dashboard.py [path/to/aviary.db]
"""

import sys

from aviary.adapters.dashboard_tui import main

if __name__ == "__main__":
    try:
        if len(sys.argv) > 1:
            main(sys.argv[1])
        else:
            main()
    except KeyboardInterrupt:
        print("\nLeaving the dashboard...")
        sys.exit(0)

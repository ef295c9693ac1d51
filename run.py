#!/usr/bin/env python3
"""
run.py - Main entry point for the Connect Four rules engine tools

Examples:
    python run.py replay 1 1 2 2 3 3 4
    python run.py --debug replay --step 0 0 0 0 0 0 0
    python run.py benchmark --iterations 500 --seed 7
"""

import sys

from connect_four.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())

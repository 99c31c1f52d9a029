#!/usr/bin/env python3
"""
Kinematics Demo Launcher

Opens a window and runs a scenario from kinesim/scenarios (or any
scenario YAML file).

Usage:
    python kinesim_demo.py
    python kinesim_demo.py step_sizes
    python kinesim_demo.py --headless --duration 5
"""

import os
import sys

# Ensure project root is on path
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from kinesim.demo import main


if __name__ == '__main__':
    sys.exit(main())

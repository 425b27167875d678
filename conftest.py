"""
Pytest configuration file.

Adds scripts/ directory to Python path for all tests.
"""

import sys
import os

# Add scripts/ directory to Python path
_project_root = os.path.dirname(os.path.abspath(__file__))
_scripts_path = os.path.join(_project_root, "scripts")

if _scripts_path not in sys.path:
    sys.path.insert(0, _scripts_path)

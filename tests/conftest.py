"""
Root pytest configuration and shared fixtures.

This file contains configuration and fixtures shared across all test types.
Directory-specific conftest.py files can override or extend these fixtures.
"""

import sys
from pathlib import Path

# Make "services" and "backend" importable without installing the project
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

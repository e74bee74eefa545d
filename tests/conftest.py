"""Pytest bootstrap for local source imports.

Keeps ``import notetree`` pointed at this checkout even when the ``pytest``
console script starts with a sys.path that lacks the repository root.
"""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

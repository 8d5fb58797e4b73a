"""Pytest configuration.

The repository uses a flat `src/` namespace layout. This conftest makes `import src...` work when
running `pytest` from a checkout without installing the project.
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

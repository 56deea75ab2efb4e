#!/usr/bin/env python3
"""Entry point to assign written-interview graders."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from assign_graders.cli import main

if __name__ == "__main__":
    sys.exit(main())

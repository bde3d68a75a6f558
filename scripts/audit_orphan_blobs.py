#!/usr/bin/env python3
"""Report registry blobs that no repository link references (GC candidates)."""

from __future__ import annotations

from regsweep.cli import main

if __name__ == "__main__":
    raise SystemExit(main())

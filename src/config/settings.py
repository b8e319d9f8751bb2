"""Global configuration and constants for the binding list and snapshots."""

from __future__ import annotations

import os
from typing import Final

SNAPSHOT_HEADER: Final = "Path,Size"
SNAPSHOT_ENCODING: Final = "utf-8"
SNAPSHOT_SUFFIX: Final = ".csv"
SNAPSHOT_BASELINE_DIR: Final = os.environ.get("BINDINGLIST_BASELINE_DIR", "tests/_file_snapshots")

# Bounded ring buffers kept by each list's listener registry
LISTENER_ERROR_CAPACITY: Final = int(os.environ.get("BINDINGLIST_LISTENER_ERROR_CAPACITY", "20"))
EVENT_TRACE_CAPACITY: Final = 50

from __future__ import annotations

import os
import tempfile

os.environ.setdefault("HANDOUT_SWEEP_INTERVAL_MINUTES", "0")
os.environ.setdefault(
    "HANDOUT_STORAGE_ROOT", os.path.join(tempfile.gettempdir(), "handout-test-uploads")
)

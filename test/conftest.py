import os
import sys
from pathlib import Path

# Disable colors before any test imports the reporter (evaluated at import time)
os.environ["SEALCHECK_NO_COLORS"] = "1"

# Ensure the project `src` directory is on sys.path so tests can import
# modules like `hir`, `lints`, `pipeline`, etc.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
TEST_DIR = Path(__file__).resolve().parent

for p in (SRC_DIR, TEST_DIR):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

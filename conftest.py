"""Root conftest — make the src-layout package importable without pip install."""

import sys
from pathlib import Path

# Put src/ first so `import sampling_approval` resolves to this checkout
# even when an older copy is installed.
_src = str(Path(__file__).parent / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)

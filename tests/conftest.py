import sys
from pathlib import Path

import pytest

# Tests live at <repo>/tests/ so the repo root is one parent above.
REPO_ROOT = Path(__file__).resolve().parents[1]

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


INTRO = """# Introduction

Welcome to the docs. Continue with [setup](02-setup.md).
"""

SETUP = """# Setup

Install it:

```python
import dawg
print(dawg.__version__)
```

Back to the [introduction](./01-intro.md#introduction).
"""


@pytest.fixture
def docs(tmp_path):
    """A source directory with two chapters and one unrelated file."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "01-intro.md").write_text(INTRO, encoding="utf-8")
    (source / "02-setup.md").write_text(SETUP, encoding="utf-8")
    (source / "notes.txt").write_text("not a chapter", encoding="utf-8")
    return source


@pytest.fixture
def quiet_logs():
    from dawg_shared import set_quiet

    set_quiet(True)
    try:
        yield
    finally:
        set_quiet(False)

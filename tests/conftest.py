from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Set

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent

# tests.support.* resolves from the repo root, rill from src/
for entry in (REPO_ROOT, REPO_ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.append(str(entry))


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Refuse to run when two scenarios collapse onto one test id."""
    del session, config

    seen: Set[str] = set()
    clashes: Set[str] = set()
    for item in items:
        if item.nodeid in seen:
            clashes.add(item.nodeid)
        seen.add(item.nodeid)

    if clashes:
        listing = "\n".join(f"- {nodeid}" for nodeid in sorted(clashes))
        raise pytest.UsageError(f"Scenario ids must be unique; repeated:\n{listing}")


@pytest.fixture
def context():
    from rill.types import Context

    return Context()

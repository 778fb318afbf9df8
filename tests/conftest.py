"""Shared fixtures for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from optstruct.core.parse import parse_record
from optstruct.models import Record, TransformConfig

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag every test under tests/unit as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def rust_parser() -> Parser:
    """Return a tree-sitter parser for Rust."""
    return get_parser("rust")


@pytest.fixture
def generic_record() -> Record:
    """A generic struct mixing optional and plain fields."""
    return parse_record(
        """
        struct S<T> {
            string: Option<String>,
            int: i32,
            generic: T,
            optional_generic: Option<T>
        }
        """
    )


@pytest.fixture
def opt_config() -> TransformConfig:
    return TransformConfig(name="Opt")

"""Test configuration and fixtures for icounter."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def example_tree(tmp_path):
    """Create the reference directory structure.

    root/
    ├── .hidden_file
    ├── .is_hidden/
    │   └── secret.txt
    ├── a/
    │   ├── b/
    │   │   └── b1.txt
    │   ├── e/
    │   │   ├── e1.txt
    │   │   └── e2.txt
    │   └── a1.txt
    ├── f/
    │   └── f1.txt
    └── r1.txt

    Visible entries give 11 inodes; with hidden entries there are 14.
    """
    root = tmp_path / "root"
    root.mkdir()
    (root / "a").mkdir()
    (root / "a" / "a1.txt").touch()
    (root / "a" / "b").mkdir()
    (root / "a" / "b" / "b1.txt").touch()
    (root / "a" / "e").mkdir()
    (root / "a" / "e" / "e1.txt").touch()
    (root / "a" / "e" / "e2.txt").touch()
    (root / "f").mkdir()
    (root / "f" / "f1.txt").touch()
    (root / ".is_hidden").mkdir()
    (root / ".is_hidden" / "secret.txt").touch()
    (root / ".hidden_file").touch()
    (root / "r1.txt").touch()
    return root

# tests/conftest.py
import pytest
import sys
from pathlib import Path
from typing import Any, Dict

# Make sure the package is importable from a source checkout
package_root = Path(__file__).parent.parent
sys.path.insert(0, str(package_root))


def create_test_structure(base_path: Path, structure: Dict[str, Any]):
    """Recursively creates a directory structure from a dictionary."""
    base_path.mkdir(parents=True, exist_ok=True)

    for name, content in structure.items():
        path = base_path / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            create_test_structure(path, content)
        elif isinstance(content, str): # Text file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        elif isinstance(content, bytes): # Binary file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        elif content is None: # Empty file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        else:
            raise TypeError(f"Unsupported structure type for {name}: {type(content)}")


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keeps tests away from the real ~/.codeprompt_config.json."""
    config_file = tmp_path / "codeprompt_config.json"
    monkeypatch.setenv("CODEPROMPT_CONFIG", str(config_file))
    return config_file


@pytest.fixture
def make_tree(tmp_path):
    """Returns a builder: make_tree(structure, name='proj') -> root path."""
    def _make(structure: Dict[str, Any], name: str = "proj") -> Path:
        root = tmp_path / name
        create_test_structure(root, structure)
        return root
    return _make


@pytest.fixture
def scenario_root(make_tree):
    """a.txt, b/c.txt, b/.git/HEAD and a root .gitignore ignoring '.git/'."""
    return make_tree({
        ".gitignore": ".git/\n",
        "a.txt": "alpha\n",
        "b": {
            "c.txt": "charlie\n",
            ".git": {"HEAD": "ref: refs/heads/main\n"},
        },
    })


@pytest.fixture
def project_root(make_tree):
    """A small mixed project."""
    return make_tree({
        "README.md": "# My Project\n",
        "setup.cfg": "[metadata]\nname = demo\n",
        "src": {
            "main.py": "print('hello')\n",
            "utils": {
                "helpers.py": "# Utility functions\n",
                "data.json": '{"key": "value"}\n',
            },
        },
        "tests": {
            "test_main.py": "import pytest\n",
        },
        "assets": {
            "logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
        },
    })

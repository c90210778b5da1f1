"""
Shared fixtures for phashsort tests.
Creates isolated temporary directories with synthetic images of known content.
"""
import random
import shutil
import sys
from pathlib import Path
from typing import Callable, Dict, List

import pytest
from PIL import Image

# Add src/ to sys.path so 'phashsort' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from phashsort.services.fingerprint_store import SqliteFingerprintStore  # noqa: E402


def _pattern_image(seed: int, size: int = 64, cells: int = 8) -> Image.Image:
    """Grid of random grey tiles. Different seeds give clearly different structure."""
    rng = random.Random(seed)
    small = Image.new("L", (cells, cells))
    small.putdata([rng.randrange(256) for _ in range(cells * cells)])
    return small.resize((size, size), Image.Resampling.NEAREST)


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """
    Factory: make_image(path, seed, fmt=None) writes a synthetic image.
    The same seed always produces the same pixels, whatever the format.
    """
    def _make(path: Path, seed: int, fmt: str = None) -> Path:
        path = Path(path)
        _pattern_image(seed).save(path, format=fmt)
        return path
    return _make


@pytest.fixture
def copy_image() -> Callable[[Path, Path], Path]:
    """Factory: byte-identical copy of an existing file."""
    def _copy(source: Path, destination: Path) -> Path:
        shutil.copyfile(source, destination)
        return Path(destination)
    return _copy


@pytest.fixture
def scan_dir(tmp_path) -> Path:
    directory = tmp_path / "photos"
    directory.mkdir()
    return directory


@pytest.fixture
def scenario_files(scan_dir, make_image, copy_image) -> Dict[str, Path]:
    """
    A.png and B.png share content, C.png is distinct,
    notes.txt is not an image and subdir/ is not a regular file.
    """
    files = {}
    files["A"] = make_image(scan_dir / "A.png", seed=1)
    files["B"] = copy_image(files["A"], scan_dir / "B.png")
    files["C"] = make_image(scan_dir / "C.png", seed=2)
    files["notes"] = scan_dir / "notes.txt"
    files["notes"].write_text("not an image")
    subdir = scan_dir / "subdir"
    subdir.mkdir()
    make_image(subdir / "nested.png", seed=1)
    return files


@pytest.fixture
def store(tmp_path):
    """Initialized on-disk store, closed after the test."""
    db = SqliteFingerprintStore(str(tmp_path / "fingerprints.db"))
    db.ensure_initialized()
    yield db
    db.close()


class ListScanner:
    """DirectoryScanner returning a fixed list, for tests that need a known order."""

    def __init__(self, paths: List[Path]):
        self.paths = list(paths)

    def scan(self) -> List[Path]:
        return list(self.paths)


@pytest.fixture
def list_scanner():
    return ListScanner

from pathlib import Path
import pytest

from cachesim.config import SimConfig


@pytest.fixture
def write_trace(tmp_path: Path):
    """Returns a helper that writes trace lines to a file and gives back its path."""
    def _write(lines, name="test.trace"):
        path = tmp_path / name
        path.write_text("".join(line + "\n" for line in lines))
        return path
    return _write


@pytest.fixture
def dm_config():
    """1KB direct-mapped cache with 16-byte blocks."""
    return SimConfig(cache_size_kb=1, block_size=16, associativity=1)


@pytest.fixture
def two_way_config():
    """1KB 2-way set-associative cache with 16-byte blocks."""
    return SimConfig(cache_size_kb=1, block_size=16, associativity=2)
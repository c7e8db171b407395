import pytest

from avl_tree import build_tree
from settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(path=str(tmp_path / "settings.json"))


@pytest.fixture
def perfect_tree():
    # 50 / (30: 20, 40) / (70: 60, 80), built without any rotation
    return build_tree([50, 30, 70, 20, 40, 60, 80])

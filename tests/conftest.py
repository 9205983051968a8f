import json
from pathlib import Path
from typing import Any, Dict

import pytest


def load_example(name: str) -> Dict[str, Any]:
    return json.loads(Path(__file__).parent.parent.joinpath("examples", name).read_text())


@pytest.fixture
def unit_square() -> Dict[str, Any]:
    return load_example("unit_square.json")


@pytest.fixture
def triangle() -> Dict[str, Any]:
    return load_example("triangle.json")


@pytest.fixture
def pentagon() -> Dict[str, Any]:
    return load_example("pentagon.json")

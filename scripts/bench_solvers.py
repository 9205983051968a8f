#!/usr/bin/env python3
import json
import time
from pathlib import Path
from typing import Any, Dict

from lpviz.dispatch import run_request
from scripts.generate_instances import generate_random_polygon


def load_example(name: str) -> Dict[str, Any]:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return json.loads(path.read_text())


def main() -> None:
    cases = [(f"examples/{name}", load_example(name)) for name in ("unit_square.json", "triangle.json", "pentagon.json")]
    for seed in range(3):
        cases.append((f"random-{seed}", generate_random_polygon(8, seed)))

    print("name,solver,success,iterates,time_ms")
    for name, problem in cases:
        for solver in ("simplex", "ipm", "pdhg", "central"):
            request = {"solver": solver, **problem}
            start = time.perf_counter()
            response = run_request(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            iterates = len(response.result["iterates"]) if response.success else 0
            print(f"{name},{solver},{response.success},{iterates},{elapsed_ms:.2f}")


if __name__ == "__main__":
    main()

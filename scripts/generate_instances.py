#!/usr/bin/env python3
import argparse
import json
import math
import random
from pathlib import Path
from typing import Any, Dict, List, Optional


def generate_random_polygon(num_vertices: int, seed: Optional[int] = None, radius: float = 5.0) -> Dict[str, Any]:
    """Random convex polygon inscribed in a circle, as lines, vertices and an objective."""
    rng = random.Random(seed)
    cx, cy = rng.uniform(-2.0, 2.0), rng.uniform(-2.0, 2.0)
    angles = sorted(rng.uniform(0.0, 2.0 * math.pi) for _ in range(num_vertices))
    vertices = [[cx + radius * math.cos(t), cy + radius * math.sin(t)] for t in angles]

    lines: List[List[float]] = []
    for i, (x0, y0) in enumerate(vertices):
        x1, y1 = vertices[(i + 1) % num_vertices]
        # outward normal of a counter-clockwise edge
        a, b = y1 - y0, x0 - x1
        lines.append([a, b, a * x0 + b * y0])

    theta = rng.uniform(0.0, 2.0 * math.pi)
    return {
        "lines": lines,
        "vertices": vertices,
        "objective": [math.cos(theta), math.sin(theta)],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random convex polygon LP instances.")
    parser.add_argument("--vertices", type=int, default=6, help="Number of polygon vertices")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = [
        generate_random_polygon(args.vertices, (args.seed or 0) + idx)
        for idx in range(args.count)
    ]

    if args.out:
        Path(args.out).write_text(json.dumps(instances, indent=2))
    else:
        print(json.dumps(instances, indent=2))


if __name__ == "__main__":
    main()

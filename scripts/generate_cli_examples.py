from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli")
BASE_FLAGS = ["--no-display"]


@dataclass
class Example:
    name: str
    args: list[str]
    returncode: int = 0
    expected: list[Path] = field(default_factory=list)

    def full_args(self) -> list[str]:
        command = [sys.executable, "julia_set.py", *BASE_FLAGS, *self.args]
        for path in self.expected:
            command.extend(["--output", str(path)])
        return command


EXAMPLES: list[Example] = [
    Example(
        name="full-view",
        args=["800", "600", "4", "3", "0", "0", "0.285", "0.01", "1"],
        expected=[EXAMPLES_ROOT / "full-view" / "julia.png"],
    ),
    Example(
        name="half-view",
        args=["800", "600", "2", "1.5", "0", "0", "0.285", "0.01", "1"],
        expected=[EXAMPLES_ROOT / "half-view" / "julia.png"],
    ),
    Example(
        name="off-center",
        args=["800", "600", "1", "0.75", ".45", ".22", "0.285", "0.01", "1"],
        expected=[EXAMPLES_ROOT / "off-center" / "julia.png"],
    ),
    Example(
        name="dendrite",
        args=["800", "600", "4", "3", "0", "0", "-0.8", "0.156", "4"],
        expected=[EXAMPLES_ROOT / "dendrite" / "julia.png"],
    ),
    Example(name="insufficient-args", args=["800", "600"], returncode=2),
    Example(name="zero-workers", args=["800", "600", "4", "3", "0", "0", "0.285", "0.01", "0"], returncode=3),
    Example(name="zero-width", args=["0", "600", "4", "3", "0", "0", "0", "0", "1"], returncode=3),
    Example(name="non-number", args=["800", "600", "four", "3", "0", "0", "0", "0", "1"], returncode=4),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _verify(example: Example) -> None:
    for path in example.expected:
        if not path.is_file():
            raise RuntimeError(f"Expected file {path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean(example.expected)
        completed = subprocess.run(example.full_args(), check=False)
        if completed.returncode != example.returncode:
            raise RuntimeError(
                f"Example {example.name} exited with {completed.returncode}, expected {example.returncode}"
            )
        _verify(example)
    print("\nAll CLI examples ran successfully.")


if __name__ == "__main__":
    main()

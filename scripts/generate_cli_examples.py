from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "80"]


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return ["python", "viewer.py", *self.args]


def _simple(name: str, flags: list[str], filename: str) -> Example:
    target = EXAMPLES_ROOT / name / filename
    return Example(
        name=name,
        args=[*BASE_ARGS, *flags, "--output", str(target)],
        expected=[Expected(target)],
        clean=[EXAMPLES_ROOT / name],
    )


EXAMPLES: list[Example] = [
    _simple("default", [], "default-view.png"),
    _simple("max-iterations", ["--max-iterations", "200"], "high-iterations.png"),
    _simple("rectangle", ["--top", "1.5", "--left", "-2.5", "--bottom", "-1.5", "--right", "1"], "square-ish.png"),
    _simple("inside-offset", ["--inside-offset", "1"], "offset.png"),
    _simple("colors", ["--inside-color", "#0a3ba0", "--outside-color", "gold"], "custom-palette.png"),
    _simple("click", ["--click", "100", "40"], "one-click.png"),
    _simple("zoom-rate", ["--zoom-rate", "2", "--click", "100", "40", "--click", "80", "40"], "midpoint-zoom.png"),
    _simple("canvas-origin", ["--canvas-origin", "20", "10", "--click", "120", "50"], "offset-click.png"),
    _simple("recolor", ["--recolor-outside", "#ff8800"], "recolored.png"),
    _simple("format", ["--format", "webp"], "custom.webp"),
    _simple("verbose", ["--verbose"], "diagnostic.png"),
    Example(
        name="gif",
        args=[
            *BASE_ARGS,
            "--click", "100", "40",
            "--click", "80", "40",
            "--gif", str(EXAMPLES_ROOT / "gif" / "zoom.gif"),
            "--output", str(EXAMPLES_ROOT / "gif" / "last.png"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "gif" / "zoom.gif"), Expected(EXAMPLES_ROOT / "gif" / "last.png")],
        clean=[EXAMPLES_ROOT / "gif"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean(example.clean or [])
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()

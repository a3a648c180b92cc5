from __future__ import annotations

from typing import Literal

Increment = Literal["major", "minor", "patch"]

INCREMENTS: tuple[Increment, ...] = ("major", "minor", "patch")


def parse_increment(value: str | None) -> Increment | None:
    match value:
        case "major":
            return "major"
        case "minor":
            return "minor"
        case "patch":
            return "patch"
        case _:
            return None

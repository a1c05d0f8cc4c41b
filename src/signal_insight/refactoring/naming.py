"""Signal naming convention checks.

A compliant name is lowercase words (letters and digits) joined by single
underscores, with at most one leading underscore marking it private:

    health_changed, _internal_tick, level2_loaded    compliant
    healthChanged, PlayerDied                        mixed_case
    item collected                                   contains_spaces
    health__changed, __hidden, hp-changed            not_snake_case
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

_SNAKE_CASE = re.compile(r"^_?[a-z0-9]+(?:_[a-z0-9]+)*$")
_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z0-9])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")

COMMON_SUFFIXES = (
    "changed",
    "pressed",
    "released",
    "completed",
    "finished",
    "entered",
    "exited",
    "started",
    "stopped",
    "updated",
)
COMMON_PREFIXES = ("on",)

_SUFFIX = re.compile(rf"_({'|'.join(COMMON_SUFFIXES)})$")
_PREFIX = re.compile(rf"^({'|'.join(COMMON_PREFIXES)})_")


@dataclass(frozen=True)
class NamingViolation:
    signal_name: str
    violation_type: str  # contains_spaces | mixed_case | not_snake_case
    suggested_fix: str
    file_paths: tuple[str, ...] = ()


def is_snake_case(name: str) -> bool:
    return bool(_SNAKE_CASE.match(name))


def to_snake_case(name: str) -> str:
    """Deterministic snake_case form of *name*.

    Splits on non-alphanumeric runs, then on case transitions, lowercases
    every word and joins with ``_``. A leading underscore survives as one.

    >>> to_snake_case("healthChanged")
    'health_changed'
    >>> to_snake_case("HTTPRequestSent")
    'http_request_sent'
    >>> to_snake_case("item collected")
    'item_collected'
    """
    words: list[str] = []
    for part in _SEPARATORS.split(name):
        words.extend(w.lower() for w in _WORD.findall(part))
    snake = "_".join(words)
    if snake and name.startswith("_"):
        snake = f"_{snake}"
    return snake


def validate_naming(
    signal_name: str, file_paths: Iterable[str] = ()
) -> Optional[NamingViolation]:
    """Return the convention violation of *signal_name*, or None if compliant."""
    if is_snake_case(signal_name):
        return None

    if re.search(r"\s", signal_name):
        kind = "contains_spaces"
    elif any(c.isupper() for c in signal_name):
        kind = "mixed_case"
    else:
        kind = "not_snake_case"

    return NamingViolation(
        signal_name=signal_name,
        violation_type=kind,
        suggested_fix=to_snake_case(signal_name),
        file_paths=tuple(sorted(set(file_paths))),
    )


def has_common_pattern(signal_name: str) -> bool:
    """True for idiomatic event names such as on_ready or health_changed."""
    return extract_prefix(signal_name) is not None or extract_suffix(signal_name) is not None


def extract_suffix(signal_name: str) -> Optional[str]:
    match = _SUFFIX.search(signal_name)
    return match.group(1) if match else None


def extract_prefix(signal_name: str) -> Optional[str]:
    match = _PREFIX.match(signal_name)
    return match.group(1) if match else None

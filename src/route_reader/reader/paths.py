"""Path fragment joining and normalization."""

import re

from route_reader.errors import MalformedPathExpression

_SLASHES = re.compile(r"/{2,}")


def _parameter_names(fragment: str) -> list[str]:
    """Names of the ``{...}`` segments in a fragment, checking brace balance."""
    names = []
    depth = 0
    start = 0
    for i, ch in enumerate(fragment):
        if ch == "{":
            if depth:
                raise MalformedPathExpression(f"nested '{{' in path {fragment!r}")
            depth = 1
            start = i + 1
        elif ch == "}":
            if not depth:
                raise MalformedPathExpression(f"unmatched '}}' in path {fragment!r}")
            depth = 0
            name = fragment[start:i].split(":", 1)[0].strip()
            if not name:
                raise MalformedPathExpression(f"empty path parameter in {fragment!r}")
            names.append(name)
    if depth:
        raise MalformedPathExpression(f"unclosed '{{' in path {fragment!r}")
    return names


def normalize_path(value: str) -> str:
    """Single leading slash, no repeated or trailing slashes ("/" stays "/")."""
    value = _SLASHES.sub("/", "/" + value.strip())
    if len(value) > 1:
        value = value.rstrip("/")
    return value


def join_paths(base: str | None, fragment: str | None) -> str:
    """Join a class base path and a method fragment into one normalized path.

    Raises MalformedPathExpression on unbalanced braces or when the same path
    parameter appears twice across the two fragments.
    """
    base = base or ""
    fragment = fragment or ""
    base_names = _parameter_names(base)
    fragment_names = _parameter_names(fragment)
    seen: set[str] = set()
    for name in base_names + fragment_names:
        if name in seen:
            raise MalformedPathExpression(f"path parameter {{{name}}} declared twice in {base + '/' + fragment!r}")
        seen.add(name)
    return normalize_path(f"{base}/{fragment}")

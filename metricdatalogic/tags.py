from __future__ import annotations

from typing import Dict


def _first_arg(args: str) -> str:
    """Text of the first argument in 'arg1, arg2, ...)' at nesting depth 0."""
    depth = 0
    for i, ch in enumerate(args):
        if ch == "(":
            depth += 1
        elif ch == ")":
            if depth == 0:
                return args[:i]
            depth -= 1
        elif ch == "," and depth == 0:
            return args[:i]
    return args


def _metric_part(name: str) -> str:
    # Descend through the first argument of each call, outermost first
    s = name
    while True:
        opening = s.find("(")
        if opening < 0:
            return s.strip().strip("'\"")
        s = _first_arg(s[opening + 1 :])


def extract_tags(name: str) -> Dict[str, str]:
    """
    Derive the tag set of a metric name.

    - 'a.b.c' -> {'name': 'a.b.c'}
    - 'a.b;dc=x;env=prod' -> {'name': 'a.b', 'dc': 'x', 'env': 'prod'}
    - function expressions use the metric in their first argument,
      e.g. 'sumSeries(a.b;x=y, c.d)' -> {'name': 'a.b', 'x': 'y'}.
    Segments without '=' are ignored; later duplicates win.
    """
    metric = _metric_part(name)
    path, *segments = metric.split(";")
    tags = {"name": path}
    for seg in segments:
        key, sep, value = seg.partition("=")
        if not sep or not key:
            continue
        tags[key] = value
    return tags

"""Named placeholder substitution for route path templates."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

__all__ = ["interpolate"]

_PLACEHOLDER = re.compile(r":(\w+)")


def interpolate(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Replace ``:name`` placeholders with values from ``params``.

    Unknown placeholders are left untouched::

        >>> interpolate("/foo/:id/edit", {"id": "7"})
        '/foo/7/edit'
        >>> interpolate("/:a/:b", {"a": "x"})
        '/x/:b'
    """
    values = params or {}

    def replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        return str(values[key])

    return _PLACEHOLDER.sub(replace, template)

"""Lightweight string templating for blueprint files."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, MutableMapping

from .errors import ScaffoldError
from .naming import dasherize, normalize_class_name

__all__ = [
    "TemplateRenderer",
    "TemplateRenderingError",
]


_PLACEHOLDER_PATTERN = re.compile(r"{{\s*(?P<expression>[^{}]+?)\s*}}")


class TemplateRenderingError(ScaffoldError):
    """Raised when the renderer cannot evaluate a placeholder."""


def _lookup(context: Mapping[str, Any], dotted_path: str) -> Any:
    """Follow ``dotted_path`` through mappings and public data attributes.

    Methods and private names are never reached, so template text cannot run
    code. Anything unresolvable raises :class:`KeyError`.
    """

    value: Any = context
    for segment in dotted_path.split("."):
        if isinstance(value, Mapping):
            if segment not in value:
                raise KeyError(segment)
            value = value[segment]
        elif segment.startswith("_") or not hasattr(value, segment):
            raise KeyError(segment)
        else:
            value = getattr(value, segment)
        if callable(value):
            raise KeyError(segment)
    return value


def _to_json(value: Any) -> str:
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return json.dumps(str(value))


def _apply_filter(value: Any, filter_name: str, filters: Mapping[str, Callable[[Any], Any]]) -> Any:
    try:
        filter_func = filters[filter_name]
    except KeyError as exc:
        raise TemplateRenderingError(f"unknown filter '{filter_name}'") from exc

    return filter_func(value)


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates with ``{{ placeholder|filters }}`` expressions."""

    filters: MutableMapping[str, Callable[[Any], Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.filters:
            self.filters.update(
                {
                    "upper": lambda value: str(value).upper(),
                    "lower": lambda value: str(value).lower(),
                    "title": lambda value: str(value).title(),
                    "dasherize": lambda value: dasherize(str(value)),
                    "class": lambda value: normalize_class_name(str(value)),
                    "strip": lambda value: str(value).strip(),
                    "json": _to_json,
                }
            )

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        missing: str = "keep",
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The template string to evaluate.
        context:
            Mapping providing values for placeholders.
        missing:
            Controls what happens when a placeholder cannot be resolved. The
            supported policies are ``"keep"`` (return the placeholder unchanged),
            ``"empty"`` (replace with an empty string) and ``"error"`` (raise
            :class:`TemplateRenderingError`).
        """

        if missing not in {"keep", "empty", "error"}:
            raise ValueError("missing must be 'keep', 'empty', or 'error'")

        def substitute(match: re.Match[str]) -> str:
            expression = match.group("expression")
            parts = [part.strip() for part in expression.split("|") if part.strip()]
            if not parts:
                return match.group(0)

            key, *filters = parts
            try:
                value = _lookup(context, key)
            except KeyError:
                if missing == "keep":
                    return match.group(0)
                if missing == "empty":
                    return ""
                raise TemplateRenderingError(f"missing value for '{key}'")

            for filter_name in filters:
                value = _apply_filter(value, filter_name, self.filters)

            return str(value)

        return _PLACEHOLDER_PATTERN.sub(substitute, template)

    def render_bytes(
        self,
        data: bytes,
        context: Mapping[str, Any],
        *,
        encoding: str = "utf-8",
        missing: str = "keep",
    ) -> bytes:
        """Render ``data`` as text, or return it untouched when it is not text.

        Content that does not decode with ``encoding`` is treated as binary
        (images, fonts) and copied verbatim.
        """

        try:
            text = data.decode(encoding)
        except UnicodeDecodeError:
            return data

        return self.render_string(text, context, missing=missing).encode(encoding)

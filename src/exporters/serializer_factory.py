# src/exporters/serializer_factory.py — v1
"""Factory for report serializer instantiation.

Report formats go through the report model. Any other name is treated by
the engine as an rdflib serializer for a raw graph dump.
"""

from __future__ import annotations

import importlib

from earlreport.exporters.base_serializer import BaseReportSerializer

_SERIALIZERS: dict[str, str] = {
    "jsonld": "earlreport.exporters.jsonld_serializer.JsonLdSerializer",
    "turtle": "earlreport.exporters.turtle_serializer.TurtleSerializer",
    "html": "earlreport.exporters.html_serializer.HtmlSerializer",
}

_ALIASES: dict[str, str] = {
    "json": "jsonld",
    "json-ld": "jsonld",
    "ttl": "turtle",
}


class UnsupportedFormatError(ValueError):
    """Raised when a report format is not supported."""


def canonical_format(fmt: str) -> str:
    """Resolve aliases: 'json' -> 'jsonld', 'ttl' -> 'turtle'."""
    key = fmt.strip().lower()
    return _ALIASES.get(key, key)


def is_report_format(fmt: str) -> bool:
    return canonical_format(fmt) in _SERIALIZERS


def create_serializer(fmt: str, **options: object) -> BaseReportSerializer:
    """Instantiate the serializer for ``fmt``.

    Args:
        fmt: Format name or alias.
        **options: Constructor options (``template`` for html, ``indent``
            for jsonld).

    Raises:
        UnsupportedFormatError: If ``fmt`` is not a report format.
    """
    fqcn = _SERIALIZERS.get(canonical_format(fmt))
    if fqcn is None:
        raise UnsupportedFormatError(
            f"Unsupported report format: {fmt!r}. "
            f"Supported: {', '.join(sorted(_SERIALIZERS))}"
        )
    module_path, class_name = fqcn.rsplit(".", 1)
    cls = getattr(importlib.import_module(module_path), class_name)
    return cls(**options)

"""Collection to OpenAPI converters."""

from postman_exporter.converters.base import ConversionOptions, Converter, OutputFormat
from postman_exporter.converters.openapi import OpenAPIConverter
from postman_exporter.converters.p2o import P2OCommandConverter

CONVERTERS = {
    "builtin": OpenAPIConverter,
    "p2o": P2OCommandConverter,
}


def get_converter(name: str = "builtin") -> Converter:
    """Instantiate a converter by its configuration name."""
    try:
        return CONVERTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown converter '{name}'. Valid converters: {', '.join(sorted(CONVERTERS))}"
        ) from None


__all__ = [
    "CONVERTERS",
    "ConversionOptions",
    "Converter",
    "OpenAPIConverter",
    "OutputFormat",
    "P2OCommandConverter",
    "get_converter",
]

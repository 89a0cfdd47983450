"""Common interface for collection to OpenAPI converters.

The converter is injected into ConversionAdapter, which lets tests swap in
a fake and lets users choose between the built-in converter and the
postman-to-openapi command line tool.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable

OutputFormat = Literal["json", "yaml"]


@dataclass(frozen=True)
class ConversionOptions:
    """Options forwarded to the converter."""

    default_tag: str
    output_format: OutputFormat = "json"


@runtime_checkable
class Converter(Protocol):
    """Turns a collection file into an OpenAPI document file.

    Example:
        converter: Converter = OpenAPIConverter()
        converter.convert(input_path, output_path, ConversionOptions("Users"))
    """

    def convert(
        self, input_path: Path, output_path: Path, options: ConversionOptions
    ) -> None:
        """Convert the collection at input_path and write the result to output_path.

        Args:
            input_path: File holding the collection body
            output_path: File the OpenAPI document is written to
            options: Default tag and output format

        Raises:
            ConverterError: the collection could not be converted
        """
        ...

"""Converter backed by the ``p2o`` command of the postman-to-openapi npm package."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

from postman_exporter.converters.base import ConversionOptions
from postman_exporter.errors import ConverterError
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)

P2O_COMMAND = "p2o"


class P2OCommandConverter:
    """Runs ``p2o <input> -f <output> -o <options.json>``."""

    def __init__(self, command: str = P2O_COMMAND) -> None:
        self._command = command

    def convert(
        self, input_path: Path, output_path: Path, options: ConversionOptions
    ) -> None:
        output_path = Path(output_path)
        options_path = output_path.with_name(f"{output_path.stem}.options.json")
        options_path.write_text(
            json.dumps(
                {
                    "defaultTag": options.default_tag,
                    "outputFormat": options.output_format,
                }
            ),
            encoding="utf-8",
        )

        cmd = [
            self._command,
            str(input_path),
            "-f",
            str(output_path),
            "-o",
            str(options_path),
        ]
        logger.debug("Running converter", cmd=" ".join(cmd))

        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise ConverterError(
                f"'{self._command}' not found; install it with "
                "`npm install -g postman-to-openapi`"
            ) from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            raise ConverterError(
                f"{self._command} exited with status {e.returncode}: {detail}"
            ) from e
        finally:
            options_path.unlink(missing_ok=True)

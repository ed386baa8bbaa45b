"""
Output sinks for the license table.

Two formats are supported:
- csv: header row `category,name,url,license`, one row per dependency
- json: a list of objects with the same columns plus the dependency's purl
"""

import csv
import json
from typing import Callable, Dict, Iterable, TextIO

from .logging_config import logger
from .models import COLUMNS, Dependency

DEFAULT_FORMAT = "csv"


def write_csv(dependencies: Iterable[Dependency], stream: TextIO) -> int:
    """
    Write dependencies as CSV, flushing after every row.

    Args:
        dependencies: Dependencies in output order
        stream: Writable text stream

    Returns:
        Number of rows written (excluding the header)
    """
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(COLUMNS)
    count = 0
    for dependency in dependencies:
        writer.writerow(dependency.to_row())
        stream.flush()
        count += 1
    return count


def write_json(dependencies: Iterable[Dependency], stream: TextIO) -> int:
    """
    Write dependencies as a JSON array.

    Args:
        dependencies: Dependencies in output order
        stream: Writable text stream

    Returns:
        Number of records written
    """
    records = [dict(zip(COLUMNS, dependency.to_row()), purl=dependency.purl) for dependency in dependencies]
    json.dump(records, stream, indent=2)
    stream.write("\n")
    stream.flush()
    return len(records)


_WRITERS: Dict[str, Callable[[Iterable[Dependency], TextIO], int]] = {
    "csv": write_csv,
    "json": write_json,
}

SUPPORTED_FORMATS = tuple(_WRITERS)


def write_dependencies(
    dependencies: Iterable[Dependency], stream: TextIO, output_format: str = DEFAULT_FORMAT
) -> int:
    """
    Write dependencies in the requested format.

    Raises:
        ValueError: If the format is not supported
    """
    if output_format not in _WRITERS:
        raise ValueError(f"Unsupported output format: {output_format}. Supported: {', '.join(SUPPORTED_FORMATS)}")
    count = _WRITERS[output_format](dependencies, stream)
    logger.debug(f"Wrote {count} {output_format} record(s)")
    return count

"""
Corpus Exporter
===============
Writes flattened listing records to a delimited text file.

Format (default, "raw"):
    ``title,policy_url`` per line, ``\\n``-separated, UTF-8, no header,
    no escaping. A title that contains a comma produces an extra column.

Format (``quote=True``):
    Same columns written with the ``csv`` module, so titles containing
    commas or quotes are quoted per RFC 4180. Like the raw format, the last
    row has no trailing newline.

The target file is overwritten; missing parent directories are created.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Iterable, List

from .errors import ExportError
from .models import ListingNode

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = str(Path("files") / "corpus.csv")


def format_rows(records: Iterable[ListingNode]) -> str:
    """Raw comma-joined rows, newline-separated, without a trailing newline."""
    return "\n".join(f"{title},{policy_url}" for title, policy_url in (r.to_row() for r in records))


def format_quoted_rows(records: Iterable[ListingNode]) -> str:
    """RFC 4180 rows, newline-separated, without a trailing newline."""
    buf = io.StringIO()
    csv.writer(buf, lineterminator='\n').writerows(r.to_row() for r in records)
    text = buf.getvalue()
    return text[:-1] if text.endswith('\n') else text


def export_csv(records: List[ListingNode], filepath: str = DEFAULT_OUTPUT, quote: bool = False) -> str:
    """
    Write ``records`` to ``filepath`` and return its absolute path.

    Raises:
        ExportError: if the directory cannot be created or the file written.
    """
    path = Path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = format_quoted_rows(records) if quote else format_rows(records)
        with open(path, 'w', newline='', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        raise ExportError(str(path), e.strerror or str(e)) from e

    logger.info(f"Exported {len(records)} record(s) to {path}")
    return str(path.absolute())

"""
app/parsers/tabular_decoder.py

Line-oriented delimited-text decoder for shipment uploads.

Each line is parsed on its own, so a quoted field cannot span lines. Quoted
fields may contain the delimiter, and a doubled quote inside a quoted field
is a literal quote. Whitespace after a delimiter is skipped, so
`a, "b, c"` is two fields. Rows whose field count differs from the header are
dropped silently.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


@dataclass(frozen=True)
class DecodeResult:
    """
    Decoded rows plus how many data lines were dropped.
    """

    headers: tuple[str, ...]
    rows: list[dict[str, str]]
    dropped_lines: int


class TabularDecoder:
    """
    Parses raw upload text into ordered field-name -> value mappings.
    """

    def __init__(self, *, delimiter: str = ",") -> None:
        if len(delimiter) != 1 or delimiter in {'"', "\n", "\r"}:
            raise ValueError(f"Unsupported delimiter {delimiter!r}.")
        self._delimiter = delimiter

    def decode(self, text: str) -> list[dict[str, str]]:
        return self.decode_with_stats(text).rows

    def decode_with_stats(self, text: str) -> DecodeResult:
        content = text.lstrip(_BOM).strip()
        if not content:
            return DecodeResult(headers=(), rows=[], dropped_lines=0)

        lines = [line.rstrip("\r") for line in content.split("\n")]
        headers = tuple(self.parse_line(lines[0]))

        rows: list[dict[str, str]] = []
        dropped = 0
        for line_number, line in enumerate(lines[1:], start=2):
            try:
                values = self.parse_line(line)
            except csv.Error as exc:
                dropped += 1
                logger.debug("Dropping unparseable line=%s error=%s", line_number, exc)
                continue
            if len(values) != len(headers):
                dropped += 1
                logger.debug(
                    "Dropping line=%s fields=%s expected=%s",
                    line_number,
                    len(values),
                    len(headers),
                )
                continue
            rows.append(dict(zip(headers, values)))

        if dropped:
            logger.info("Decoded rows=%s dropped_lines=%s", len(rows), dropped)
        return DecodeResult(headers=headers, rows=rows, dropped_lines=dropped)

    def parse_line(self, line: str) -> list[str]:
        """
        Split one line into trimmed field values. A blank line yields [].
        """

        if not line.strip():
            return []
        reader = csv.reader(
            [line],
            delimiter=self._delimiter,
            quotechar='"',
            doublequote=True,
            skipinitialspace=True,
            strict=False,
        )
        try:
            values = next(reader)
        except StopIteration:
            return []
        return [value.strip() for value in values]


def decode(text: str, *, delimiter: str = ",") -> list[dict[str, str]]:
    """
    Decode upload text into rows keyed by the header line's field names.
    """

    return TabularDecoder(delimiter=delimiter).decode(text)

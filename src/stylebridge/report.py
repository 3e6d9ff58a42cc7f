# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Strict parsing of the linter's JSON report."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final

from pydantic import TypeAdapter, ValidationError
from pydantic_core import ErrorDetails

from .errors import ReportFormatError
from .models import PerFileFindings

REPORT_ENCODING: Final[str] = "utf-8"
_FRAGMENT_LIMIT: Final[int] = 120
_BOM: Final[str] = "\ufeff"

_REPORT_ADAPTER: Final[TypeAdapter[list[PerFileFindings]]] = TypeAdapter(list[PerFileFindings])


def _format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as ``[0].warnings[1].line``."""

    rendered = ""
    for part in loc:
        if isinstance(part, int):
            rendered += f"[{part}]"
        elif rendered:
            rendered += f".{part}"
        else:
            rendered = str(part)
    return rendered or "<root>"


def _fragment(value: object) -> str:
    """Return a printable excerpt of ``value`` capped at the fragment limit.

    Args:
        value: Offending input reported by the validator.

    Returns:
        str: Text excerpt, truncated with ``...`` when too long.
    """

    text = value if isinstance(value, str) else repr(value)
    if len(text) > _FRAGMENT_LIMIT:
        return f"{text[:_FRAGMENT_LIMIT]}..."
    return text


def _report_error(error: ErrorDetails) -> ReportFormatError:
    """Convert the first pydantic validation error into :class:`ReportFormatError`."""

    location = _format_location(error.get("loc", ()))
    return ReportFormatError(
        error.get("msg", "invalid report"),
        location=location,
        fragment=_fragment(error.get("input")),
    )


def parse(output: bytes | str) -> list[PerFileFindings]:
    """Parse the linter's stdout into per-file findings.

    Args:
        output: Raw JSON report, as bytes or text.

    Returns:
        list[PerFileFindings]: Findings grouped by file, in report order. An
        empty report array yields an empty list.

    Raises:
        ReportFormatError: If the output is blank, is not valid JSON, or does not
            match the report schema. No partial result is returned.
    """

    if isinstance(output, bytes):
        try:
            raw = output.decode(REPORT_ENCODING)
        except UnicodeDecodeError as exc:
            raise ReportFormatError(
                f"report is not valid {REPORT_ENCODING}",
                location=f"byte {exc.start}",
                fragment=_fragment(output[exc.start : exc.start + 16]),
            ) from exc
    else:
        raw = output
    if not raw.strip():
        raise ReportFormatError("report is empty")
    try:
        return _REPORT_ADAPTER.validate_json(raw.lstrip(_BOM))
    except ValidationError as exc:
        raise _report_error(exc.errors(include_url=False)[0]) from exc


def parse_file(path: Path) -> list[PerFileFindings]:
    """Read and parse a report document stored on disk.

    Raises:
        OSError: If the file cannot be read.
        ReportFormatError: If the document is malformed.
    """

    with path.open("rb") as handle:
        return parse(handle.read())


__all__ = ["parse", "parse_file"]

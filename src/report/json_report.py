"""
JSON Report Rendering Module.

Serializes the backlog report, or a failure document, to the JSON shape consumed
by CI jobs and chat integrations. Exactly one document is written per run.
"""

import json
import sys
from typing import Any, Dict, TextIO

from analyzers.models import BacklogReport


def report_to_dict(report: BacklogReport) -> Dict[str, Any]:
    """
    Convert a report to its JSON-ready mapping.

    ``status`` is omitted on errored repositories and ``error`` on successful ones.
    """
    return report.model_dump(mode="json", by_alias=True, exclude_none=True)


def render_report(report: BacklogReport) -> str:
    return json.dumps(report_to_dict(report), ensure_ascii=False)


def render_error(message: str) -> str:
    return json.dumps({"ok": False, "error": message}, ensure_ascii=False)


def emit_json(content: str, stream: TextIO = None) -> None:
    """Write one JSON document followed by a newline to stdout."""
    stream = stream or sys.stdout
    stream.write(content + "\n")
    stream.flush()

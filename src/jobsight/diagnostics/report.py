"""Rendered invocation reports and their text form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jobsight.contracts import NIL_INVOCATION_ID, ArgumentDisplayModel, InvocationSnapshot


@dataclass(frozen=True)
class InvocationReport:
    """Everything shown for one invocation.

    ``arguments`` holds a model for each blob-bound argument whose value is
    a blob reference. ``parameter_logs`` is None when no log is available.
    """

    snapshot: InvocationSnapshot
    arguments: dict[str, ArgumentDisplayModel] = field(default_factory=dict)
    parameter_logs: dict[str, str] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "invocation_id": str(self.snapshot.id),
            "function": self.snapshot.function_display_title,
            "succeeded": self.snapshot.succeeded,
            "arguments": {name: model.to_dict() for name, model in self.arguments.items()},
            "parameter_logs": self.parameter_logs,
        }


def describe_ownership(model: ArgumentDisplayModel) -> str:
    """Short ownership phrase for an argument, e.g. ``"written by this invocation"``."""
    if model.is_missing:
        return "missing"
    if model.is_self_owned:
        return "written by this invocation"
    if model.owner_id is None or model.owner_id == NIL_INVOCATION_ID:
        return "no ownership information"
    return f"written by {model.owner_id}"


class ReportTextFormatter:
    """Format an InvocationReport as human-readable text for CLI output."""

    def format(self, report: InvocationReport) -> str:
        snapshot = report.snapshot
        lines: list[str] = []
        lines.append("=" * 60)
        lines.append("INVOCATION REPORT")
        lines.append("=" * 60)
        lines.append("")

        lines.append(f"Invocation: {snapshot.id}")
        if snapshot.function_display_title:
            lines.append(f"Function: {snapshot.function_display_title}")
        if snapshot.succeeded is None:
            lines.append("Status: Running")
        else:
            lines.append(f"Status: {'Succeeded' if snapshot.succeeded else 'Failed'}")
        if snapshot.exception_message:
            lines.append(f"Exception: {snapshot.exception_message}")
        lines.append("")

        if snapshot.arguments:
            lines.append("--- Arguments ---")
            for name, argument in snapshot.arguments.items():
                model = report.arguments.get(name)
                if model is None:
                    lines.append(f"  {name}: {argument.value}")
                    continue
                direction = "output" if model.is_output else "input"
                lines.append(f"  {name}: {model.ref} ({direction}) {describe_ownership(model)}")
            lines.append("")

        lines.append("--- Parameter Logs ---")
        if report.parameter_logs is None:
            lines.append("  No parameter log available.")
        elif not report.parameter_logs:
            lines.append("  Nothing to report.")
        else:
            for name, text in report.parameter_logs.items():
                first, *rest = text.rstrip("\n").split("\n")
                lines.append(f"  {name}: {first.rstrip()}")
                lines.extend(f"    {line}" for line in rest)
        lines.append("")

        return "\n".join(lines)

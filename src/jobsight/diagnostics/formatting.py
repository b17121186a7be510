"""Human-readable text for parameter log records.

Formatting is total over the ParameterLog union: every record yields a
string or None, never an exception. None means "nothing to show" and the
parameter is left out of the rendered log.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import ROUND_HALF_UP, Context, Decimal

from jobsight.contracts import (
    BinderParameterLog,
    ParameterLog,
    ParameterLogDocument,
    ReadBlobParameterLog,
    TableParameterLog,
    TextParameterLog,
    UnknownParameterLog,
)
from jobsight.diagnostics.descriptors import AttributeTextRenderer, DescriptorRenderer

# Each band starts a little below the unit so "about" stays honest:
# 56 minutes reads as "about 1 hour", 960 ms as "about 1 second".
_HOUR_THRESHOLD = timedelta(minutes=55)
_MINUTE_THRESHOLD = timedelta(seconds=55)
_SECOND_THRESHOLD = timedelta(milliseconds=950)

# Percentages round half away from zero. The precision covers any finite float.
_PERCENT_PLACES = Decimal("0.01")
_PERCENT_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def phrase_duration(elapsed: timedelta) -> str:
    """Describe time spent on I/O, e.g. ``"(about 2 minutes spent on I/O)"``.

    Returns an empty string for a zero duration. Counts use round-half-even;
    the millisecond count is floored at 1 so the text never says
    "0 milliseconds".
    """
    if elapsed == timedelta(0):
        return ""

    if elapsed > _HOUR_THRESHOLD:
        unit_name = "hour"
        unit_count = round(elapsed / timedelta(hours=1))
    elif elapsed > _MINUTE_THRESHOLD:
        unit_name = "minute"
        unit_count = round(elapsed / timedelta(minutes=1))
    elif elapsed > _SECOND_THRESHOLD:
        unit_name = "second"
        unit_count = round(elapsed / timedelta(seconds=1))
    else:
        unit_name = "millisecond"
        unit_count = max(round(elapsed / timedelta(milliseconds=1)), 1)

    plural = "s" if unit_count > 1 else ""
    return f"(about {unit_count} {unit_name}{plural} spent on I/O)"


class LogFormatter:
    """Format parameter log records for display.

    Binder items are described through the descriptor renderer at format
    time; items it cannot describe are skipped.
    """

    def __init__(self, descriptor_renderer: DescriptorRenderer | None = None) -> None:
        self._descriptor_renderer = descriptor_renderer if descriptor_renderer is not None else AttributeTextRenderer()

    def format(self, log: ParameterLog | None) -> str | None:
        match log:
            case ReadBlobParameterLog():
                return self._format_read_blob(log)
            case TableParameterLog():
                return self._format_table(log)
            case BinderParameterLog():
                return self._format_binder(log)
            case TextParameterLog():
                return log.value
            case UnknownParameterLog() | None:
                return None

    def format_document(self, document: ParameterLogDocument) -> dict[str, str]:
        """Format every record, leaving out parameters with nothing to show."""
        rendered: dict[str, str] = {}
        for name, log in document.items():
            text = self.format(log)
            if text is not None:
                rendered[name] = text
        return rendered

    def _format_read_blob(self, log: ReadBlobParameterLog) -> str:
        # Zero length reads as 0% rather than dividing by zero
        percent = log.bytes_read * 100.0 / log.length if log.length else 0.0
        rounded = Decimal(repr(percent)).quantize(_PERCENT_PLACES, context=_PERCENT_CONTEXT)
        text = f"Read {log.bytes_read:,} bytes ({rounded}% of total). "
        if log.elapsed_time != timedelta(0):
            text += phrase_duration(log.elapsed_time)
        return text

    def _format_table(self, log: TableParameterLog) -> str:
        noun = "entity" if log.entities_updated == 1 else "entities"
        return f"Updated {log.entities_updated} {noun}"

    def _format_binder(self, log: BinderParameterLog) -> str | None:
        if log.items is None:
            return None

        # Header counts every item, including ones skipped below
        lines = [f"Bound {len(log.items)} object(s):\n"]
        for item in log.items:
            attribute_text = self._descriptor_renderer.render(item.descriptor)
            if attribute_text is None:
                continue
            status = self.format(item.log)
            if status is not None:
                lines.append(f"{attribute_text} {status}\n")
            else:
                lines.append(f"{attribute_text}\n")
        return "".join(lines)

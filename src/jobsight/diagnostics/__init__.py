"""Invocation diagnostics: blob causality and parameter log rendering.

Exports:
- CausalityResolver: blob -> OwnershipRecord
- ArgumentModelBuilder: argument value -> ArgumentDisplayModel
- ParameterLogReader: snapshot -> ParameterLogDocument
- LogFormatter, phrase_duration: records -> display text
- AttributeTextRenderer, DescriptorRenderer: binder descriptor text
- InvocationDiagnostics, InvocationReport: entry points for presentation
- ReportTextFormatter: text form of a report for the CLI
"""

from jobsight.diagnostics.arguments import ArgumentModelBuilder
from jobsight.diagnostics.causality import CausalityResolver
from jobsight.diagnostics.descriptors import AttributeTextRenderer, DescriptorRenderer
from jobsight.diagnostics.formatting import LogFormatter, phrase_duration
from jobsight.diagnostics.parameter_logs import ParameterLogReader
from jobsight.diagnostics.report import InvocationReport, ReportTextFormatter
from jobsight.diagnostics.service import InvocationDiagnostics

__all__ = [
    "ArgumentModelBuilder",
    "AttributeTextRenderer",
    "CausalityResolver",
    "DescriptorRenderer",
    "InvocationDiagnostics",
    "InvocationReport",
    "LogFormatter",
    "ParameterLogReader",
    "ReportTextFormatter",
    "phrase_duration",
]

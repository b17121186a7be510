"""
jobsight: diagnostics for blob-bound function invocations.

Reads back what an execution left in Azure Blob Storage (blob ownership
metadata and parameter logs) and renders it for people.
"""

__version__ = "0.1.0"

"""Report module for rendering comparison results.

This package contains:
- text: TextReporter for aligned, optionally colored and centered terminal output
- store: StructuredReport and ReportFormat for the matched/unmatched document
- path: Utilities for choosing where the structured report is written
"""

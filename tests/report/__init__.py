"""Tests for report module.

Test Files and Coverage:
========================

| Test File          | Test Classes           | Tested Constructs                      | Tested Functionalities                   |
|--------------------|------------------------|----------------------------------------|------------------------------------------|
| test_text.py       | TextReporterTest       | TextReporter                           | Alignment, centering, colors, verbose    |
|                    | TerminalHelpersTest    | center(), should_color(), detect_width | Width fallback, color decisions          |
| test_store.py      | StructuredReportTest   | StructuredReport                       | Partitioning, JSON and msgpack documents |
|                    | WriteReportTest        | write_report(), get_report_path()      | Destination, atomic replacement          |
"""

"""Tests for command implementation modules.

Test Files and Coverage:
========================

| Test File        | Test Classes   | Tested Constructs | Tested Functionalities                                   |
|------------------|----------------|-------------------|----------------------------------------------------------|
| test_compare.py  | CompareTest    | do_compare()      | Rendering, tally, report writing, folder open failures   |
"""

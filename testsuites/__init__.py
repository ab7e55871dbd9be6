"""
Test suites package.

Kept importable so the shared fakes in `testsuites.unit.fakes` can be used
by both the unit and the browser-backed suites.
"""

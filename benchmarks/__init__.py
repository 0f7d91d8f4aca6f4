"""Performance benchmarks for descent.

This package times every minimizer on the classic test objectives through
:func:`descent.suite.run_suite`.
"""

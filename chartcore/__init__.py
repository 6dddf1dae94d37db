"""Core indicator and strategy logic.

This package contains pure business logic with no I/O dependencies
(no files, network or chart rendering). Every computation takes an
immutable candle snapshot plus configuration values and returns freshly
allocated results, so calls can run in parallel without coordination.
"""

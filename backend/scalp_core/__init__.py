"""Core logic for bar building, indicators and signal classification.

This package contains pure business logic with no I/O dependencies
(no network, no shared state). The HTTP service in scalp_app/ feeds it
with upstream data and serves its results.
"""

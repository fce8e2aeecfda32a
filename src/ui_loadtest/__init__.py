"""
Concurrent UI load-testing harness.

Drives many isolated browser sessions through one fixed workflow, measures
the click-to-modal-ready latency of each, and summarizes the results.
"""

__version__ = "0.1.0"

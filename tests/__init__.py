"""
AddonStreams Test Suite

Test Categories:
- unit/: Fast, isolated unit tests (no network)
"""

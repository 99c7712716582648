"""
tests.unit
==========

Runtime-level tests: journal, engine, storage/event surface, configuration
and u256 helpers. Contract behavior lives under ``tests.allowance``.
"""

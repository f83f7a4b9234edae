"""Test suite for the StatusFlow lifecycle engine.

This package contains tests for:
- Field presence predicate (boundary values)
- Lifecycle definitions (graph invariants, document round-trip, schema)
- Transition evaluator and editability resolver
- Origin-freezing session
- Post-transition reconciliation
- Event system and structured logging
- Integration scenarios (runtime end to end with a fake server)
"""

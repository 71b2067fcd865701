"""Core (UI-agnostic) donation statistics logic.

This package contains:
- cell coercion and column typing for schemaless rows
- date parsing for the supported spreadsheet date shapes
- metric functions (JSON-serializable dataclass results)
- the dashboard orchestrator that composes them
"""

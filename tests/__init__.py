"""VoxPrompt Test Suite.

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures and the stub AI provider
    ├── unit/                # Unit tests (no database, no network)
    └── integration/         # HTTP API tests against SQLite

Run all tests:
    pytest

Run specific test categories:
    pytest -m unit
    pytest -m integration
    pytest -m "not slow"
"""

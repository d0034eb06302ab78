"""Test suite for the authentication engine.

Test structure follows the test pyramid:
- unit/: Unit tests - domain logic and handlers with mocked dependencies
- integration/: Integration tests - full flows against the in-memory backend

Everything runs in-process; no database or network is needed.
"""

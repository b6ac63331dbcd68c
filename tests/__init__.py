"""
asyncemit Test Suite
====================

Test Organization
-----------------
- tests/unit/          : Fast unit tests (no external dependencies)
- tests/conftest.py    : Shared fixtures (emitter, call recorder)

Testing Philosophy
------------------
- Each test builds its own Emitter; nothing is shared between tests
- Async behaviour is asserted through observable ordering, not timing
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""

"""Integration tests for VoxPrompt.

Integration tests:
- Run the API through httpx.ASGITransport
- Use a fresh SQLite database per test
- Replace the AI gateway with a stub provider

Markers:
- @pytest.mark.integration - All integration tests
- @pytest.mark.slow - Tests that wait through a real retry delay
"""

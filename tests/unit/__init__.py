"""Unit tests for VoxPrompt core functionality.

Unit tests should:
- Not require the database or the AI service
- Test individual functions and classes in isolation
- Fake remote calls with stubs or httpx.MockTransport
"""

"""
Customer-support chat backend: FastAPI HTTP surface, SQLite conversation
store and an OpenAI-backed reply generator.
"""

__version__ = "1.0.0"

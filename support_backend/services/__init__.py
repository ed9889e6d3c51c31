"""
The `services` package holds the application logic that sits between the
HTTP router and the storage/generation layers.

Contents
--------
- chat_service
    `ChatService` orchestrates a chat exchange (session resolution, history
    window, user message, reply or apology) and serializes work per session.
"""

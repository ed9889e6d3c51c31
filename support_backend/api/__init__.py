"""
API Package — FastAPI Routers • Models • Validation • Reply Generation
=====================================================================

Mission
-------
This package defines the backend's HTTP interface and the reply generator
behind it: FastAPI routing, request/response contracts, input sanitization,
error rendering, and the OpenAI-backed support agent.

Contents
--------
- fast_api
    FastAPI routers:
      • Chat: POST /chat/message, GET /chat/history/{sessionId}, POST /chat/new
      • Health: GET /health (API, database and LLM status)

- models
    Pydantic data contracts:
      • ChatMessageRequest, ChatResponse (chat exchange)
      • ConversationHistory, MessageOut (transcripts)
      • NewConversationResponse, HealthStatus, ErrorResponse

- utils
    Validation helpers:
      • is_valid_session_id(session_id): UUID-v4 shape check
      • sanitize_message(message): trim, strip NUL, cap whitespace runs

- exception_handlers
    register_exception_handlers(app): renders errors as {error, message, code}

- llm_pipeline
    ReplyGenerator: builds the prompt, calls ChatOpenAI under a deadline and
    maps provider failures to the LLMError family; check_health() probes the provider.

- prompt_utilities
    System prompt template, knowledge base loading, LangChain message building.

Resources
---------
- knowledge_base/
    Store identity (store_info.json) and FAQ text (faq.md) embedded in the system prompt.
"""

"""
Prompt Construction (Knowledge Base → System Prompt → Provider Messages)
========================================================================

Purpose
-------
Utilities for loading the store's knowledge base, rendering the support-agent
system prompt, and building the LangChain message list handed to the chat model.

Key Functions
-------------
- load_store_info       : Read the store identity (name, website, support contacts).
- load_knowledge_base   : Read the FAQ text, packaged or from an override path.
- render_system_prompt  : Fill the system prompt template with identity + FAQ.
- build_messages        : System prompt, chronological history, then the new user turn.
- lc_text_from_content  : Flatten LangChain message content into plain text.

Resources
---------
- knowledge_base/store_info.json : store identity used in the prompt and the apology text.
- knowledge_base/faq.md          : default FAQ knowledge embedded in the system prompt.
"""

import json
import os
from typing import List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.prompts import PromptTemplate

from support_backend.database.entities.messages import Message, Sender

KNOWLEDGE_BASE_DIR = os.path.join(os.path.dirname(__file__), "knowledge_base")
"""Directory holding the packaged knowledge payload."""

SYSTEM_PROMPT_TEMPLATE = PromptTemplate.from_template(
    """You are a friendly and helpful customer support agent for {name}, a premium e-commerce store specializing in tech accessories and lifestyle products.

Your role is to:
1. Answer customer questions accurately using the knowledge base provided
2. Be concise but thorough - don't give overly long responses
3. Be empathetic and professional
4. If you don't know something or it's not in your knowledge base, politely say so and suggest contacting {support_email} or calling {support_phone}
5. Never make up information about policies, prices, or products

Important guidelines:
- Keep responses friendly but professional
- Use bullet points for lists when helpful
- If a customer seems frustrated, acknowledge their feelings
- Always offer to help further at the end of your response
- Don't use excessive emojis or overly casual language

Here is your knowledge base:
{knowledge}

Remember: You're representing {name}, so maintain a helpful and trustworthy tone."""
)
"""Support-agent instructions; variables: name, support_email, support_phone, knowledge."""


def load_store_info(path: Optional[str] = None) -> dict:
    """
    Load the store identity.

    Args:
        path (str | None): JSON file to read; defaults to the packaged `store_info.json`.

    Returns:
        dict: Keys `name`, `tagline`, `website`, `support_email`, `support_phone`.
    """
    path = path or os.path.join(KNOWLEDGE_BASE_DIR, "store_info.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_knowledge_base(path: Optional[str] = None) -> str:
    """
    Load the FAQ knowledge text.

    Args:
        path (str | None): Override file (e.g. `settings.KNOWLEDGE_BASE_PATH`).
                           Defaults to the packaged `faq.md`.

    Returns:
        str: The knowledge text, stripped.
    """
    path = path or os.path.join(KNOWLEDGE_BASE_DIR, "faq.md")
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip()


def render_system_prompt(knowledge: str, store_info: dict) -> str:
    """Render `SYSTEM_PROMPT_TEMPLATE` for the given knowledge text and store identity."""
    return SYSTEM_PROMPT_TEMPLATE.format(
        name=store_info["name"],
        support_email=store_info["support_email"],
        support_phone=store_info["support_phone"],
        knowledge=knowledge,
    )


def build_messages(system_prompt: str, history: Sequence[Message], user_message: str) -> List[BaseMessage]:
    """
    Build the provider message list for one reply.

    - One leading SystemMessage with the rendered prompt.
    - The history in the given (chronological) order: `user` → HumanMessage, `ai` → AIMessage.
    - The new user message last.

    Args:
        system_prompt (str): Rendered system prompt.
        history (Sequence[Message]): Prior turns, oldest first. Never includes `user_message`.
        user_message (str): Sanitized text of the new turn.

    Returns:
        list[BaseMessage]: LangChain messages ready for `ChatOpenAI.ainvoke`.
    """
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for msg in history:
        if msg.sender == Sender.USER.value:
            messages.append(HumanMessage(content=msg.text))
        else:
            messages.append(AIMessage(content=msg.text))
    messages.append(HumanMessage(content=user_message))
    return messages


def lc_text_from_content(content) -> str:
    """
    Flatten LangChain message content into text.

    Content is either a string or a list of parts (strings or dicts with a `text` key);
    non-text parts are ignored.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text") or "")
    return "".join(parts)

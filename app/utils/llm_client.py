"""
OpenRouter chat-completions client.
Blocking `requests` call with a hard timeout; provider failures are mapped
to `LLMProviderError` with a readable message.
"""
import asyncio
import logging
from typing import Dict, List, Optional

import requests

from app.config import (
    APP_TITLE,
    APP_URL,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT,
    OPENROUTER_API_URL,
    OPENROUTER_MODEL,
    get_openrouter_api_key,
)
from app.utils.http_utils import make_session

logger = logging.getLogger("plagiarism.llm_client")

MODELS = {
    "CLAUDE_SONNET": "anthropic/claude-3.5-sonnet",
    "CLAUDE_HAIKU": "anthropic/claude-3-haiku",
    "GPT4_TURBO": "openai/gpt-4-turbo",
    "GPT4O": "openai/gpt-4o",
    "GPT4O_MINI": "openai/gpt-4o-mini",
    "LLAMA_70B": "meta-llama/llama-3.1-70b-instruct",
    "MISTRAL_LARGE": "mistralai/mistral-large",
}

_SESSION = make_session()


class LLMProviderError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LLMConfigurationError(LLMProviderError):
    pass


def system_message(content: str) -> Dict[str, str]:
    return {"role": "system", "content": content}


def user_message(content: str) -> Dict[str, str]:
    return {"role": "user", "content": content}


def call_openrouter(
    messages: List[Dict[str, str]],
    model: str = OPENROUTER_MODEL,
    temperature: float = 0.7,
    max_tokens: int = LLM_MAX_TOKENS,
    response_format: str = "text",
) -> str:
    api_key = get_openrouter_api_key()
    if not api_key:
        raise LLMConfigurationError("OPENROUTER_API_KEY is not configured")

    body = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if response_format == "json":
        body["response_format"] = {"type": "json_object"}

    headers = {
        "Authorization": f"Bearer {api_key}",
        "HTTP-Referer": APP_URL,
        "X-Title": APP_TITLE,
    }

    try:
        r = _SESSION.post(OPENROUTER_API_URL, json=body, headers=headers, timeout=LLM_TIMEOUT)
    except requests.exceptions.Timeout as e:
        logger.error(f"OpenRouter request timed out after {LLM_TIMEOUT}s")
        raise LLMProviderError("OpenRouter API request timeout") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"OpenRouter request failed: {e}")
        raise LLMProviderError(f"OpenRouter API error: {e}") from e

    if r.status_code == 401:
        raise LLMProviderError("Invalid OpenRouter API key", status_code=401)
    if r.status_code == 429:
        raise LLMProviderError("OpenRouter API rate limit exceeded", status_code=429)
    if not r.ok:
        logger.error(f"OpenRouter API error {r.status_code}: {r.text[:200]}")
        raise LLMProviderError(f"OpenRouter API error: HTTP {r.status_code}", status_code=r.status_code)

    try:
        data = r.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise LLMProviderError("No response content from OpenRouter") from e

    if not content:
        raise LLMProviderError("No response content from OpenRouter")
    return content


async def acall_openrouter(messages: List[Dict[str, str]], **kwargs) -> str:
    return await asyncio.to_thread(call_openrouter, messages, **kwargs)

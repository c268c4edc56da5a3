"""
Client module for the Perplexity chat-completions API.

Perplexity speaks the OpenAI wire format, so requests go through the
`openai` SDK pointed at the Perplexity base URL. Two calls are exposed:
a cheap readiness check run before the pipeline starts, and the plan
request that produces the conversion design document.

Each call makes exactly one HTTP attempt; the SDK's own retry loop is
disabled.
"""
import logging
from typing import Any, Dict, Optional

import openai
from openai import AsyncOpenAI

from .exceptions import ConnectivityError, EmptyResponseError
from .prompts import READINESS_PROMPT

# Configure logger for this module
logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Failed to reach Perplexity API. Check your key and network connectivity."


def _field(obj: Any, name: str) -> Any:
    """Reads `name` from a dict or an SDK object, returning None when absent."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def extract_first_completion(response: Any) -> Optional[str]:
    """
    Extracts the text of the first choice from a chat-completion response.

    The response shape is treated as best-effort: `choices`, the first
    choice, its `message` and the `content` may each be missing.

    Args:
        response: An SDK ChatCompletion object or the decoded JSON body.

    Returns:
        The content string, or None if any level of the structure is absent.
    """
    choices = _field(response, "choices")
    if not isinstance(choices, (list, tuple)) or not choices:
        return None
    message = _field(choices[0], "message")
    content = _field(message, "content")
    if not isinstance(content, str):
        return None
    return content


def _api_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get('api', {})


async def _complete(api_key: str, prompt: str, config: Dict[str, Any],
                    max_tokens: int, timeout: float) -> Any:
    """Sends a single-message chat completion and returns the raw response."""
    api = _api_settings(config)
    model_name = api.get('model_name', 'sonar-reasoning-pro')
    base_url = api.get('base_url', 'https://api.perplexity.ai')

    logger.debug(f"Sending prompt to Perplexity model {model_name} (max_tokens={max_tokens}, "
                 f"timeout={timeout}s):\n{prompt[:200]}...")  # Log truncated prompt

    async with AsyncOpenAI(api_key=api_key, base_url=base_url,
                           timeout=timeout, max_retries=0) as client:
        return await client.chat.completions.create(
            model=model_name,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )


async def check_ready(api_key: str, config: Dict[str, Any]) -> bool:
    """
    Asks the service to reply with the word READY.

    Returns:
        True if the reply contains READY (case-insensitive), False if the
        service answered without confirming.

    Raises:
        ConnectivityError: If the request fails (network, timeout, auth, HTTP status).
    """
    api = _api_settings(config)
    try:
        response = await _complete(
            api_key,
            READINESS_PROMPT,
            config,
            max_tokens=api.get('readiness_max_tokens', 5),
            timeout=api.get('readiness_timeout_sec', 15),
        )
    except openai.OpenAIError as e:
        logger.error(f"Perplexity readiness check failed: {e}")
        raise ConnectivityError(CONNECTIVITY_MESSAGE) from e

    content = (extract_first_completion(response) or "").strip()
    logger.debug(f"Readiness reply: {content!r}")
    return "READY" in content.upper()


async def request_plan(api_key: str, prompt: str, config: Dict[str, Any]) -> str:
    """
    Requests the conversion plan for the given prompt.

    Returns:
        The first completion's text, exactly as returned.

    Raises:
        ConnectivityError: If the request fails (network, timeout, auth, HTTP status).
        EmptyResponseError: If the response carries no completion text.
    """
    api = _api_settings(config)
    try:
        response = await _complete(
            api_key,
            prompt,
            config,
            max_tokens=api.get('plan_max_tokens', 4000),
            timeout=api.get('plan_timeout_sec', 60),
        )
    except openai.OpenAIError as e:
        logger.error(f"Perplexity plan request failed: {e}")
        raise ConnectivityError(CONNECTIVITY_MESSAGE) from e

    content = extract_first_completion(response)
    if not content:
        logger.error("Perplexity returned no content for the conversion plan.")
        raise EmptyResponseError("Perplexity did not return a conversion plan.")

    logger.debug(f"Conversion plan received ({len(content)} characters).")
    return content

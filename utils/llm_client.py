"""
LLM Client using LiteLLM for multi-provider support.

The affirmation generator only needs short single-turn completions, but the
model string can point at any LiteLLM provider:
    - "gpt-4o-mini" (OpenAI)
    - "claude-3-5-haiku-20241022" (Anthropic)
"""

from typing import List, Dict, Optional, Any

import litellm
from tenacity import retry, stop_after_attempt, wait_exponential

from core import get_logger, OpenAIAPIError

logger = get_logger(__name__)

# Configure LiteLLM
litellm.set_verbose = False  # Set True for debugging


class LLMClient:
    """
    Unified LLM client supporting multiple providers via LiteLLM.

    Usage:
        client = LLMClient()
        text = await client.chat_with_system("gpt-4o-mini", system_prompt, "Generate a daily affirmation")
    """

    def __init__(self):
        """Initialize LLM client."""
        # LiteLLM picks up API keys from the environment (OPENAI_API_KEY, ANTHROPIC_API_KEY, ...)
        logger.info("LLM client initialized")

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        reraise=True,
    )
    async def chat(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        temperature: float = 0.9,
        max_tokens: int = 100,
        **kwargs: Any,
    ) -> str:
        """
        Generate a chat completion.

        Args:
            model: Model identifier
            messages: List of message dicts
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            **kwargs: Additional LiteLLM parameters (e.g. timeout)

        Returns:
            Generated response text (may be empty)

        Raises:
            OpenAIAPIError: If the provider call fails
        """
        logger.debug(
            "LLM request",
            model=model,
            message_count=len(messages),
            temperature=temperature,
        )

        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            logger.error("LLM request failed", model=model, error=str(e))
            raise OpenAIAPIError(
                status_code=getattr(e, "status_code", None), details=str(e)
            ) from e

        content = response.choices[0].message.content or ""
        logger.debug(
            "LLM response",
            model=model,
            tokens_used=response.usage.total_tokens if getattr(response, "usage", None) else None,
            response_length=len(content),
            finish_reason=response.choices[0].finish_reason,
        )
        return content

    async def chat_with_system(
        self,
        model: str,
        system_prompt: str,
        user_message: str,
        conversation_history: Optional[List[Dict[str, str]]] = None,
        **kwargs: Any,
    ) -> str:
        """Convenience method for chat with system prompt."""
        messages: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]

        if conversation_history:
            messages.extend(conversation_history)

        messages.append({"role": "user", "content": user_message})

        return await self.chat(model=model, messages=messages, **kwargs)


# Singleton instance
llm_client = LLMClient()

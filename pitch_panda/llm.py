"""LLM helpers: structured and vision models, retry, and bounded batch processing."""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Type, TypeVar

from pydantic import BaseModel

from . import config

logger = config.logger

T = TypeVar("T")
R = TypeVar("R")
M = TypeVar("M", bound=BaseModel)


def get_text_llm(temperature: float = 0.3, max_tokens: int | None = 2000):
    """Plain text model, used for prose generation."""
    return config.create_llm(temperature=temperature, max_tokens=max_tokens)


def get_structured_llm(schema: Type[BaseModel], temperature: float = 0.1):
    """Text model bound to a pydantic schema through function calling."""
    llm = config.create_llm(temperature=temperature)
    return llm.with_structured_output(schema, method="function_calling")


def get_structured_vision_llm(schema: Type[BaseModel]):
    """Vision model bound to a pydantic schema."""
    llm = config.create_vision_llm()
    return llm.with_structured_output(schema, method="function_calling")


def with_retry(
    fn: Callable[[], T],
    max_retries: int | None = None,
    base_delay: float | None = None,
) -> T:
    """Call fn, retrying with exponential backoff; re-raises the last error."""
    max_retries = max(1, config.LLM_MAX_RETRIES if max_retries is None else max_retries)
    base_delay = config.LLM_RETRY_BASE_DELAY if base_delay is None else base_delay

    last_error: Exception | None = None
    for attempt in range(max_retries):
        try:
            return fn()
        except Exception as exc:
            last_error = exc
            if attempt < max_retries - 1:
                delay = base_delay * (2 ** attempt)
                logger.warning(
                    f"LLM call failed (attempt {attempt + 1}/{max_retries}): {exc}. Retrying in {delay:.1f}s"
                )
                time.sleep(delay)
    raise last_error


def _coerce(schema: Type[M], result: Any) -> M:
    if isinstance(result, schema):
        return result
    if isinstance(result, dict):
        return schema.model_validate(result)
    raise TypeError(f"Unexpected structured output type: {type(result).__name__}")


def invoke_structured(schema: Type[M], messages: list, vision: bool = False) -> M:
    """Invoke a structured model with retry and validate the result into schema."""
    llm = get_structured_vision_llm(schema) if vision else get_structured_llm(schema)
    return _coerce(schema, with_retry(lambda: llm.invoke(messages)))


def invoke_text(messages: list, temperature: float = 0.3, max_tokens: int | None = 2000) -> str:
    llm = get_text_llm(temperature=temperature, max_tokens=max_tokens)
    response = with_retry(lambda: llm.invoke(messages))
    content = response if isinstance(response, str) else response.content
    return content if isinstance(content, str) else str(content)


def batch_process(items: Iterable[T], fn: Callable[[T], R], concurrency: int = 3) -> List[R]:
    """Apply fn to items with at most `concurrency` in flight; results keep input order."""
    items = list(items)
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(concurrency, len(items)))) as executor:
        return list(executor.map(fn, items))

from typing import Optional

import requests

from focusflow.core.config import settings


def ollama_generate(prompt: str, fmt: Optional[str] = None) -> str:
    payload = {"model": settings.OLLAMA_MODEL, "prompt": prompt, "stream": False}
    if fmt:
        payload["format"] = fmt
    r = requests.post(
        f"{settings.OLLAMA_HOST}/api/generate",
        json=payload,
        timeout=settings.LLM_TIMEOUT,
    )
    r.raise_for_status()
    body = r.json()
    if not isinstance(body, dict):
        raise ValueError(f"Unexpected Ollama response: {type(body).__name__}")
    return body.get("response", "")

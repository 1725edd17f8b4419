from __future__ import annotations

import os
from typing import Optional

from botocore.config import Config
from langchain_aws import ChatBedrock


class LLMError(Exception):
    pass


class LLMUnavailableError(LLMError):
    pass


class LLMResponseError(LLMError):
    pass


def has_llm_credentials() -> bool:
    # Botocore resolves the real chain at invoke time; this only checks that something is configured.
    return bool(os.getenv("AWS_ACCESS_KEY_ID") or os.getenv("AWS_PROFILE") or os.getenv("AWS_SESSION_TOKEN"))


def get_bedrock_client() -> ChatBedrock:
    model_id = os.getenv("BEDROCK_MODEL_ID", "anthropic.claude-3-5-sonnet-20240620-v1:0")
    region = os.getenv("AWS_REGION", "us-east-1")
    timeout = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
    llm = ChatBedrock(
        model_id=model_id,
        region_name=region,
        # A failed call goes straight to the local fallback, so botocore must not retry.
        config=Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 1}),
        model_kwargs={
            "temperature": float(os.getenv("BEDROCK_TEMPERATURE", "0.7")),
            "max_tokens": int(os.getenv("BEDROCK_MAX_TOKENS", "1000")),
        },
    )
    return llm


def _content_text(resp) -> str:
    content = resp.content if hasattr(resp, "content") else str(resp)
    if isinstance(content, list):
        # Some Bedrock models return content blocks instead of a plain string.
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return str(content)


def call_llm_text(prompt: str, llm: Optional[ChatBedrock] = None) -> str:
    if llm is None and not has_llm_credentials():
        raise LLMUnavailableError("AWS credentials are not configured")

    client = llm or get_bedrock_client()
    resp = client.invoke([{"role": "user", "content": prompt}])
    text = _content_text(resp)
    if not text.strip():
        raise LLMResponseError("empty completion")
    return text

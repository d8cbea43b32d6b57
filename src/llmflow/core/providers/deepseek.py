"""Deepseek adapter. Deepseek speaks the OpenAI chat completions format."""

from llmflow.core.providers.openai import OpenAICompatibleAdapter

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"


class DeepseekAdapter(OpenAICompatibleAdapter):
    base_url: str = DEEPSEEK_BASE_URL
    model: str = "deepseek-chat"

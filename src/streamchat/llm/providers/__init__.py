from .http import HttpCompletionClient
from .openai import OpenAICompletionClient

__all__ = ["HttpCompletionClient", "OpenAICompletionClient"]

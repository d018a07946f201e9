"""Deal Hunter — Black Friday deal search across LLM providers."""

__version__ = "0.1.0"

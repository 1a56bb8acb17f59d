"""sitestream — streaming LLM website generation relay."""

__version__ = "0.1.0"

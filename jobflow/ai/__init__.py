from .service import AIService, CompletionClient

__all__ = ["AIService", "CompletionClient"]

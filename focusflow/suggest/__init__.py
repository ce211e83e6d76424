from focusflow.suggest.service import Suggestion, TextSuggester

__all__ = ["Suggestion", "TextSuggester"]

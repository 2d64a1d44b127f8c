from .builder import MissingPromptField, PromptPair, build_prompt

__all__ = ["MissingPromptField", "PromptPair", "build_prompt"]

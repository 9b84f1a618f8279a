"""Regenerates a nested binding module tree from a tree of C headers."""

from .orchestrator import Orchestrator
from .translator import BindgenTranslator, TranslationError, Translator

__all__ = ["BindgenTranslator", "Orchestrator", "TranslationError", "Translator"]

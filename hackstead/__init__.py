"""Balance data model and advancement bonuses for the hackstead game."""

from .catalog import Config, ConfigLoadError, load_config, shared_config
from .validation import CorpusValidationError, assert_corpus_valid, validate_corpus

__all__ = [
    "Config",
    "ConfigLoadError",
    "CorpusValidationError",
    "assert_corpus_valid",
    "load_config",
    "shared_config",
    "validate_corpus",
]

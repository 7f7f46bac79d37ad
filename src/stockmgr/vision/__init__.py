"""写真からの商品取り込み"""

from .client import GeminiProvider, GroqProvider, PROVIDERS, get_provider, prepare_image
from .errors import (
    ClassifierConfigError,
    ClassifierError,
    ClassifierInputError,
    ClassifierParseError,
    ClassifierTransportError,
)
from .intake import IntakeResult, confirm_prefill, find_match, resolve_guess
from .parser import parse_guess, strip_code_fence

__all__ = [
    "ClassifierConfigError",
    "ClassifierError",
    "ClassifierInputError",
    "ClassifierParseError",
    "ClassifierTransportError",
    "GeminiProvider",
    "GroqProvider",
    "IntakeResult",
    "PROVIDERS",
    "confirm_prefill",
    "find_match",
    "get_provider",
    "parse_guess",
    "prepare_image",
    "resolve_guess",
    "strip_code_fence",
]

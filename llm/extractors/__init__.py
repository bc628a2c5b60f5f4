"""
Interpretación de respuestas del LLM
"""

from .result_extractor import ResultExtractor, load_json_payload, normalize_confidence

__all__ = ["ResultExtractor", "load_json_payload", "normalize_confidence"]

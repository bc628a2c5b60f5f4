"""
Preparación del contenido de entrada (archivo, portapapeles o URL)
"""

from .content_normalizer import ContentNormalizer, normalize, clean_text_for_llm
from .url_fetcher import UrlFetcher, extract_text_content

__all__ = ["ContentNormalizer", "normalize", "clean_text_for_llm", "UrlFetcher", "extract_text_content"]

"""
Descarga de páginas para el origen "url"

Una sola petición GET; el HTML se reduce a texto plano antes de normalizarlo.
"""

import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup, Comment

from config import PARSER_CONFIG
from utils.errors import InvalidRequestError

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; ConvocatoriasPro/1.0)"


def extract_text_content(html: str) -> str:
    """
    Extrae solo el contenido de texto del HTML, eliminando todo el markup

    Args:
        html: HTML a procesar

    Returns:
        Texto plano con un bloque por línea
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    for element in soup.find_all(["script", "style", "noscript", "iframe", "svg"]):
        element.decompose()
    # Navegación y pie de página rara vez contienen datos de la convocatoria
    for element in soup.find_all(["nav", "footer"]):
        element.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    text = soup.get_text(separator="\n", strip=True)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n", text)
    return text.strip()


class UrlFetcher:
    """Obtiene el texto de una URL pública"""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[int] = None):
        self.session = session or requests.Session()
        self.timeout = timeout or PARSER_CONFIG.get("url_fetch_timeout", 20)

    def fetch_text(self, url: str) -> str:
        """
        Raises:
            InvalidRequestError: URL inválida o la página no pudo descargarse
        """
        url = (url or "").strip()
        if not url.lower().startswith(("http://", "https://")):
            raise InvalidRequestError(f"URL inválida: {url or '(vacía)'}")

        logger.info(f"Descargando contenido de {url}")
        try:
            response = self.session.get(url, timeout=self.timeout, headers={"User-Agent": USER_AGENT})
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Error al descargar {url}: {e}")
            raise InvalidRequestError(f"No se pudo descargar la URL: {e}") from e

        if response.status_code >= 400:
            logger.error(f"❌ {url} respondió HTTP {response.status_code}")
            raise InvalidRequestError(f"La URL respondió con estado {response.status_code}")

        content_type = response.headers.get("Content-Type", "")
        if "html" in content_type or "<html" in response.text[:500].lower():
            return extract_text_content(response.text)
        return response.text

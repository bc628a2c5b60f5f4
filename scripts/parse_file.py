import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import load_llm_credentials
from llm import create_gateway
from models import RawInput
from services.parsing_service import ParsingService
from services.validation_service import ValidationService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extrae convocatorias de un archivo de texto con IA")
    parser.add_argument("path", help="Archivo de texto a analizar")
    parser.add_argument("--source", choices=["file", "clipboard", "url"], default="file")
    parser.add_argument("--no-ai-validation", action="store_true", help="Validar solo con reglas locales")
    return parser


def main(argv: Optional[List[str]] = None, gateway=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger = logging.getLogger("parse_file")

    args = build_parser().parse_args(argv)
    path = Path(args.path)
    if not path.is_file():
        logger.error(f"No existe el archivo: {path}")
        return 2

    if gateway is None:
        credentials = load_llm_credentials()
        if not credentials["api_key"]:
            logger.error(f"Falta la API key de {credentials['provider']}")
            return 2
        gateway = create_gateway(credentials["provider"], credentials["api_key"], credentials["model"])

    content = path.read_text(encoding="utf-8", errors="replace")
    outcome = ParsingService(gateway).parse(
        RawInput(content=content, source_kind=args.source, mime_hint=path.suffix.lstrip(".") or None)
    )

    validator = ValidationService(None if args.no_ai_validation else gateway)
    validations = [
        validator.validate(candidate).model_dump(by_alias=True)
        for candidate in outcome.convocatorias
        if not outcome.degraded
    ]

    print(json.dumps(
        {"outcome": outcome.model_dump(), "validations": validations},
        ensure_ascii=False,
        indent=2,
    ))
    logger.info(f"Análisis terminado: {len(outcome.convocatorias)} convocatorias")
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())

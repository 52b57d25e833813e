import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    data_dir: str = "data"
    catalog_path: str = os.path.join("data", "seed.json")
    currency: str = "INR"
    log_level: str = "INFO"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Читает FARMCART_* из окружения (предварительно подгружая .env)"""
    load_dotenv(env_file)

    data_dir = os.getenv("FARMCART_DATA_DIR", "data")
    return Settings(
        data_dir=data_dir,
        catalog_path=os.getenv("FARMCART_CATALOG", os.path.join(data_dir, "seed.json")),
        currency=os.getenv("FARMCART_CURRENCY", "INR").upper(),
        log_level=os.getenv("FARMCART_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

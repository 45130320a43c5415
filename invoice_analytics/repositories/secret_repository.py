import logging
import os
import re
from typing import Dict, List, Optional

from invoice_analytics.core.config import settings

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[./\\:*?"<>|]')


class SecretRepository:
    """Secrets kept as one UTF-8 file each under ``settings.SECRETS_DIR``."""

    @staticmethod
    def _path(name: str) -> str:
        filename = UNSAFE_FILENAME_CHARS.sub("_", name) + ".secret"
        return os.path.join(settings.SECRETS_DIR, filename)

    @staticmethod
    async def get(name: str) -> Optional[str]:
        path = SecretRepository._path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    @staticmethod
    async def get_many(names: List[str]) -> Dict[str, Optional[str]]:
        return {name: await SecretRepository.get(name) for name in names}

    @staticmethod
    async def set(name: str, value: Optional[str]) -> None:
        path = SecretRepository._path(name)
        if value is None:
            if os.path.exists(path):
                os.remove(path)
                logger.info(f"Removed secret {name}")
            return

        os.makedirs(settings.SECRETS_DIR, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(value)
        logger.info(f"Stored secret {name}")

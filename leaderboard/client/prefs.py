import os
from pathlib import Path
from typing import Optional

import aiofiles
import orjson

from ..config import client as client_config
from ..logger import get_logger

logger = get_logger(__name__)

NAME_KEY = "lb:name"


class Preferences:
    """Small JSON file holding client-side state such as the last display name"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or client_config.PREFS_PATH)

    async def load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            async with aiofiles.open(self.path, "rb") as f:
                data = orjson.loads(await f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    async def save(self, data: dict):
        os.makedirs(self.path.parent, exist_ok=True)
        async with aiofiles.open(self.path, "wb") as f:
            await f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))

    async def get_name(self) -> str:
        return (await self.load()).get(NAME_KEY, "")

    async def set_name(self, name: str):
        data = await self.load()
        data[NAME_KEY] = name
        await self.save(data)

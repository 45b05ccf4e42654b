# repository/blob_repository.py
import json
import logging
import os
import uuid
from typing import Any, Optional, Tuple
import aiofiles
import aiofiles.os
from repository.namespaces import Namespace
from util.enums import ErrorMessage
from util.errors import StorageError
from util.sanitize import safe_name

logger = logging.getLogger(__name__)


class BlobRepository:
    """
    Filesystem key -> value store, one file per name, split into REAL and DECOY.

    Flow:
    - Every name goes through safe_name() before a path is built.
    - Strings are stored verbatim; anything else as pretty-printed JSON.
    - Reads parse JSON when they can and fall back to the raw text.
    - No locking: concurrent writers to one name race and the last rename wins.
    """

    def __init__(self, root_dir: str) -> None:
        self._root = os.path.abspath(root_dir)

    def ensure_dirs(self) -> None:
        for ns in Namespace:
            os.makedirs(self._dir(ns), exist_ok=True)

    def _dir(self, namespace: Namespace) -> str:
        return os.path.join(self._root, Namespace(namespace).value)

    def _path(self, namespace: Namespace, name: str) -> str:
        return os.path.join(self._dir(namespace), safe_name(name))

    @staticmethod
    def serialize(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, indent=2, ensure_ascii=False)

    async def write(self, namespace: Namespace, name: str, value: Any) -> None:
        path = self._path(namespace, name)
        text = self.serialize(value)
        tmp = f"{path}.{uuid.uuid4().hex}.tmp"
        try:
            await aiofiles.os.makedirs(os.path.dirname(path), exist_ok=True)
            async with aiofiles.open(tmp, "w", encoding="utf-8") as fh:
                await fh.write(text)
            await aiofiles.os.replace(tmp, path)
        except OSError as e:
            logger.error(
                "blob.write.error ns=%s name=%s err=%s", namespace.value, name, e
            )
            try:
                await aiofiles.os.remove(tmp)
            except OSError:
                pass
            raise StorageError.of(ErrorMessage.SAVE_FAILED) from e
        logger.info("blob.write.ok ns=%s name=%s bytes=%d", namespace.value, name, len(text))

    async def read_raw(self, namespace: Namespace, name: str) -> Optional[str]:
        path = self._path(namespace, name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as fh:
                return await fh.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("blob.read.error ns=%s name=%s err=%s", namespace.value, name, e)
            raise StorageError.of(ErrorMessage.READ_FAILED) from e

    async def read(self, namespace: Namespace, name: str) -> Tuple[bool, Any]:
        """
        Return (found, value). Absence is decided on the raw text, so a stored
        `null` comes back as (True, None). Non-JSON text is returned as is.
        """
        raw = await self.read_raw(namespace, name)
        if raw is None:
            return False, None
        try:
            return True, json.loads(raw)
        except ValueError:
            return True, raw

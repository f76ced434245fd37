"""
DefaultRatingConditionCache - file-backed JSON condition cache.

All cached conditions live in one JSON file holding a list of entries:

    [
      {"condition_name": "AppLaunches",
       "current_value": {"type": "int", "value": 3}}
    ]

The file is read lazily on first access and rewritten atomically after
every save or delete. An unreadable file counts as an empty cache, while a
failed write raises ConditionCacheError.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from rating_gateway.cache.base import EntryListCache
from rating_gateway.cache.dto import ConditionCacheEntry, parse_entry
from rating_gateway.exceptions import ConditionCacheError
from rating_gateway.logger import logger
from rating_gateway.settings import settings

DATA_DIR_ENV_VAR = "RATING_GATEWAY_DATA_DIR"
FILE_SUFFIX = ".json"


def resolve_cache_directory(directory: Union[str, Path, None] = None) -> Path:
    """
    Directory the cache file lives in.

    Priority: explicit argument, then $RATING_GATEWAY_DATA_DIR, then
    settings cache.directory.
    """
    if directory is None:
        directory = os.getenv(DATA_DIR_ENV_VAR) or settings.get_nested(
            "cache.directory", "~/.rating_gateway"
        )
    return Path(directory).expanduser()


class DefaultRatingConditionCache(EntryListCache):
    """JSON file cache for condition states."""

    def __init__(
        self,
        file_name: Optional[str] = None,
        directory: Union[str, Path, None] = None
    ):
        """
        Args:
            file_name: File name without suffix (settings cache.file_name
                when None, "RatingConditionCache" by default)
            directory: Directory for the file (see resolve_cache_directory)
        """
        super().__init__()
        file_name = file_name or settings.get_nested(
            "cache.file_name", "RatingConditionCache"
        )
        self._path = resolve_cache_directory(directory) / f"{file_name}{FILE_SUFFIX}"

    @property
    def path(self) -> Path:
        return self._path

    def _read_entries(self) -> List[ConditionCacheEntry]:
        if not self._path.exists():
            return []

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(
                "Condition cache unreadable, starting empty",
                path=str(self._path),
                error=str(e),
            )
            return []

        if not isinstance(raw, list):
            logger.warning(
                "Condition cache is not a list, starting empty",
                path=str(self._path),
            )
            return []

        entries = []
        for item in raw:
            try:
                entries.append(parse_entry(item))
            except ValueError as e:
                logger.warning(
                    "Skipping malformed condition cache entry",
                    path=str(self._path),
                    error=str(e),
                )
        return entries

    def _write_entries(
        self,
        entries: List[ConditionCacheEntry],
        condition_name: Optional[str]
    ) -> None:
        payload = json.dumps(
            [entry.model_dump(mode="json") for entry in entries],
            ensure_ascii=False,
            indent=2,
        )

        tmp_path: Optional[Path] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self._path.parent),
                prefix=f".{self._path.stem}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(str(tmp_path), str(self._path))
            tmp_path = None
        except OSError as e:
            raise ConditionCacheError(self._path, e, condition_name) from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temp cache file", path=str(tmp_path))

        logger.debug(
            "Condition cache written",
            path=str(self._path),
            entries=len(entries),
            condition=condition_name,
        )

    def __repr__(self) -> str:
        return f"DefaultRatingConditionCache(path={str(self._path)!r})"

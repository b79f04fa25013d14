from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .errors import InvalidArgumentError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoaderSettings:
    """Loader settings.

    Recommended env vars:
    - `TMX_DECODE_WORKERS`: number of threads decoding layers (default 1,
      meaning layers are decoded one after another).
    - `TMX_LOG_LEVEL`: log level used by the command line tool
      (default `WARNING`).

    Values in a `.env` file are loaded into the environment first; variables
    already set in the environment win.
    """

    decode_workers: int = 1
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.decode_workers < 1:
            raise InvalidArgumentError(
                f"decode_workers must be at least 1, got {self.decode_workers}"
            )
        if self.log_level not in _LOG_LEVELS:
            raise InvalidArgumentError(
                f"Unknown log level '{self.log_level}'. "
                f"Expected one of: {', '.join(_LOG_LEVELS)}"
            )

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def load(cls, *, dotenv_path: Optional[Union[str, Path]] = None) -> "LoaderSettings":
        """Load settings from env vars (and a `.env` file when present)."""

        if dotenv_path is None:
            dotenv_path = ".env"
        load_dotenv(dotenv_path=dotenv_path, override=False)

        raw_workers = os.getenv("TMX_DECODE_WORKERS", "").strip()
        if raw_workers:
            try:
                decode_workers = int(raw_workers)
            except ValueError:
                raise InvalidArgumentError(
                    f"TMX_DECODE_WORKERS must be an integer, got '{raw_workers}'"
                ) from None
        else:
            decode_workers = 1

        log_level = os.getenv("TMX_LOG_LEVEL", "").strip().upper() or "WARNING"

        return cls(decode_workers=decode_workers, log_level=log_level)

from __future__ import annotations

from dataclasses import dataclass

from . import canon


@dataclass
class FormatConfig:
    # Wall-clock zone for CSV timestamps
    tz: str = canon.DEFAULT_TZ
    pickle_protocol: int = canon.PICKLE_PROTOCOL


def default_config() -> FormatConfig:
    return FormatConfig()

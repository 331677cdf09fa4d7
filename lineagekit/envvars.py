"""Settings read from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

VAR_UPDATE_GOLDEN = "THEMA_UPDATE_GOLDEN"
VAR_FORCE_VERIFY = "THEMA_FORCEVERIFY"
VAR_FORMAT_TXTAR = "THEMA_FORMAT_TXTAR"
VAR_FIX_LINEAGES = "THEMA_FIX_TXTAR_LINEAGES"


@dataclass(frozen=True)
class EnvSettings:
    """Switches controlling verification and golden-file handling.

    A switch is on when its variable is set to any non-empty string.
    """

    force_verify: bool = False
    reverse_translate: bool = True
    update_golden_files: bool = False
    format_txtar: bool = False
    fix_lineages: bool = False

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> "EnvSettings":
        env = os.environ if environ is None else environ

        def flag(name: str) -> bool:
            return bool(env.get(name, ""))

        return cls(
            force_verify=flag(VAR_FORCE_VERIFY),
            reverse_translate=True,
            update_golden_files=flag(VAR_UPDATE_GOLDEN),
            format_txtar=flag(VAR_FORMAT_TXTAR),
            fix_lineages=flag(VAR_FIX_LINEAGES),
        )
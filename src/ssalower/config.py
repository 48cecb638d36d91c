"""Emission settings shared by a package and its builders."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EmitConfig:
    init_suffix: str = ".init"
    runtime_prefix: str = "runtime."
    panic_func: str = "TracePanic"
    block_prefix: str = "_llgo_"
    debug_instr: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EmitConfig:
        """Build a config from ``SSALOWER_*`` environment variables."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if "SSALOWER_DEBUG_INSTR" in env:
            kwargs["debug_instr"] = env["SSALOWER_DEBUG_INSTR"].strip().lower() in _TRUE
        if env.get("SSALOWER_INIT_SUFFIX"):
            kwargs["init_suffix"] = env["SSALOWER_INIT_SUFFIX"]
        return cls(**kwargs)

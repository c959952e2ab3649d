from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "LOOP_DETECTOR_"


class DetectorSettings(BaseModel):
    """Limits and switches for loop detection"""
    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    # longest path a single traversal may hold before giving up
    max_depth: int = Field(default=10_000, ge=1)
    # nodes expanded per traversal; explored subtrees are not expanded twice
    max_steps: int = Field(default=1_000_000, ge=1)
    analyze_nested_functions: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'DetectorSettings':
        """Build settings from LOOP_DETECTOR_* environment variables (and a .env file)"""
        load_dotenv(env_file)
        values = {}
        for field_name in ("max_depth", "max_steps", "analyze_nested_functions", "log_level"):
            raw = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw
        # shorter alias for the nested-function switch
        nested = os.getenv(f"{ENV_PREFIX}NESTED_FUNCTIONS")
        if nested is not None:
            values.setdefault("analyze_nested_functions", nested)
        return cls(**values)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None, level: Optional[str] = None):
    """Setup logging configuration; without an explicit level, LOOP_DETECTOR_LOG_LEVEL decides"""
    if verbose:
        resolved = logging.DEBUG
    else:
        if level is None:
            level = DetectorSettings.from_env().log_level
        resolved = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=resolved,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )

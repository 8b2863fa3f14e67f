"""
Config model — the optional unitctl.yml.

Nothing here is required. A project without a unitctl.yml resolves
units from the default search roots and discards action output.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UnitctlConfig(BaseModel):
    """Settings read from unitctl.yml."""

    paths: list[str] = Field(default_factory=list)  # search roots, in order
    log_file: str | None = None                     # action output sink
    log_level: str | None = None

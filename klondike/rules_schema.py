"""Validation schema for Klondike rules configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class ScoringConfig(BaseModel):
    foundation_move: int = Field(10, ge=0, description="Points for any move that lands on a foundation.")
    waste_to_tableau: int = Field(5, ge=0, description="Points for moving the waste top onto a tableau pile.")


class RuleSet(BaseModel):
    draw_count: Literal[1, 3] = Field(1, description="Cards turned from the stock per draw when none is requested.")
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)


DEFAULT_RULES = RuleSet()


def load_rules(path: Optional[Union[str, Path]]) -> RuleSet:
    """Read a RuleSet from a JSON file, or return the defaults when no path is given."""
    if path is None:
        return DEFAULT_RULES
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return RuleSet.model_validate(payload)

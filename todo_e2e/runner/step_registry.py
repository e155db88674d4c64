"""
Explicit table of step patterns.

pytest-bdd happily accepts two step definitions with the same text and
silently lets the last one win. The registry records every pattern as it is
declared and refuses a second registration, so a clash fails at import time
instead of running the wrong handler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from pytest_bdd import parsers

from todo_e2e.core.errors import DuplicateStepError

KEYWORDS = ("given", "when", "then")


@dataclass(frozen=True)
class StepDefinition:
    keyword: str
    pattern: str
    module: str


class StepRegistry:
    def __init__(self) -> None:
        self._table: Dict[str, StepDefinition] = {}

    def parse(self, keyword: str, pattern: str, module: str = "") -> parsers.parse:
        """Record ``pattern`` and return the pytest-bdd parser for it."""
        if keyword not in KEYWORDS:
            raise ValueError(f"Unknown step keyword {keyword!r}")
        existing = self._table.get(pattern)
        if existing is not None:
            raise DuplicateStepError(
                f'Step "{pattern}" is already defined as a {existing.keyword} step'
                f"{' in ' + existing.module if existing.module else ''}"
            )
        self._table[pattern] = StepDefinition(keyword=keyword, pattern=pattern, module=module)
        return parsers.parse(pattern)

    def given(self, pattern: str, module: str = "") -> parsers.parse:
        return self.parse("given", pattern, module)

    def when(self, pattern: str, module: str = "") -> parsers.parse:
        return self.parse("when", pattern, module)

    def then(self, pattern: str, module: str = "") -> parsers.parse:
        return self.parse("then", pattern, module)

    def definitions(self) -> List[StepDefinition]:
        return list(self._table.values())

    def patterns(self) -> List[str]:
        return list(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._table


# Shared by every step module so clashes across modules are caught too.
registry = StepRegistry()

__all__ = ["KEYWORDS", "StepDefinition", "StepRegistry", "registry"]

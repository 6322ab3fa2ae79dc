"""
Session store for chain variables.
"""

from __future__ import annotations

import logging

from .models import ChainVariable

logger = logging.getLogger(__name__)


class ChainVariableStore:
    """
    Ordered collection of chain variables keyed by name.

    Adding a variable whose name already exists replaces the earlier
    entry in place (last write wins).

    Example:
        store = ChainVariableStore()
        store.add(ChainVariable(name="token", value="abc", source="JSON: token"))
        store.as_variable_map()   # {"token": "abc"}
    """

    def __init__(self, variables: list[ChainVariable] | None = None):
        self._variables: list[ChainVariable] = []
        for variable in variables or []:
            self.add(variable)

    def add(self, variable: ChainVariable) -> None:
        for i, existing in enumerate(self._variables):
            if existing.name == variable.name:
                logger.debug(f"Replacing chain variable {variable.name!r}")
                self._variables[i] = variable
                return
        self._variables.append(variable)

    def remove(self, variable_id: str) -> bool:
        """Remove the variable with ``variable_id``; returns False if absent."""
        for i, existing in enumerate(self._variables):
            if existing.id == variable_id:
                del self._variables[i]
                return True
        return False

    def get(self, name: str) -> ChainVariable | None:
        for variable in self._variables:
            if variable.name == name:
                return variable
        return None

    def clear(self) -> None:
        self._variables.clear()

    def as_variable_map(self) -> dict[str, str]:
        return {v.name: v.value for v in self._variables}

    def __iter__(self):
        return iter(list(self._variables))

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, name: object) -> bool:
        return any(v.name == name for v in self._variables)

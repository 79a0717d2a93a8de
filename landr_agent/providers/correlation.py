"""
Tool-call correlation ids.

Ids are derived from the tool name so they survive frameworks that drop
vendor ids between the assistant turn and the tool-result turn. Repeated
invocations of one tool within the same turn get a sequence suffix.
"""

from typing import Dict, Set


class ToolCallIdAllocator:
    """Allocates ids for the invocations of a single model turn."""

    PREFIX = "call_"

    def __init__(self):
        self._counts: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def allocate(self, tool_name: str) -> str:
        base = f"{self.PREFIX}{tool_name}"
        while True:
            count = self._counts.get(tool_name, 0) + 1
            self._counts[tool_name] = count
            candidate = base if count == 1 else f"{base}_{count}"
            # a tool literally named "<name>_2" may already own the suffixed id
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    def reset(self):
        self._counts.clear()
        self._issued.clear()

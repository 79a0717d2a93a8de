from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any, Dict, List

from jsonschema import Draft202012Validator, ValidationError
from pydantic import BaseModel

from ...config.errors import ConfigurationError
from ...models.conversation_types import ConversationTurn, ToolInvocation
from ...orchestration.errors import ToolExecutionError
from ..errors import FatalToolError, ToolNotFoundError
from .tool_definition import Tool

if TYPE_CHECKING:
    from ...orchestration.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

ALWAYS_FATAL = (ConfigurationError, FatalToolError)


class ToolExecutor:
    """Runs tool invocations and packages their results as tool turns.

    Handler failures become ``{"error": ...}`` results so the model can
    react to them. Configuration errors, ``FatalToolError`` and the tool's
    own ``fatal_errors`` propagate and abort the run.
    """

    def __init__(self, registry: ToolRegistry, concurrent: bool = True) -> None:
        self.registry = registry
        self.concurrent = concurrent

    async def execute(self, tool: Tool, args: Dict[str, Any]) -> Any:
        if tool.parameters:
            Draft202012Validator(tool.parameters).validate(args)
        result = tool.handler(**args)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseModel):
            result = result.model_dump()
        return result

    async def execute_invocation(self, invocation: ToolInvocation) -> ConversationTurn:
        tool = self.registry.get_tool(invocation.tool_name)
        if tool is None:
            logger.warning(f"Model requested unknown tool '{invocation.tool_name}'")
            return ConversationTurn.tool_result(invocation, {"error": str(ToolNotFoundError(invocation.tool_name))})

        if invocation.raw_arguments is not None:
            logger.warning(f"Undecodable arguments for '{tool.name}': {invocation.raw_arguments[:200]}")
            return ConversationTurn.tool_result(
                invocation,
                {"error": f"arguments are not a valid JSON object: {invocation.raw_arguments}"},
            )

        try:
            result = await self.execute(tool, invocation.arguments)
        except ValidationError as e:
            return ConversationTurn.tool_result(invocation, {"error": f"invalid arguments: {e.message}"})
        except ALWAYS_FATAL:
            logger.error(f"Tool '{tool.name}' failed fatally")
            raise
        except Exception as e:
            if tool.fatal_errors and isinstance(e, tool.fatal_errors):
                logger.error(f"Tool '{tool.name}' failed fatally: {e}")
                raise ToolExecutionError(tool.name, e) from e
            logger.warning(f"Tool '{tool.name}' failed: {e}", extra={"tool": tool.name})
            return ConversationTurn.tool_result(invocation, {"error": str(e)})

        logger.debug(f"Tool '{tool.name}' completed", extra={"tool": tool.name})
        return ConversationTurn.tool_result(invocation, result)

    async def execute_invocations(self, invocations: List[ToolInvocation]) -> List[ConversationTurn]:
        """Execute invocations, returning result turns in invocation order."""
        if not self.concurrent or len(invocations) <= 1:
            return [await self.execute_invocation(i) for i in invocations]

        tasks = [asyncio.ensure_future(self.execute_invocation(i)) for i in invocations]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

from ...models.conversation_types import ConversationTurn
from ...orchestration.errors import BudgetExceeded
from ...providers.base import ProviderAdapter
from ..models.agent_options import AgentOptions
from ..models.agent_result import AgentResult
from ..tools.tool_executor import ToolExecutor
from .state import AgentState, RunState

if TYPE_CHECKING:
    from ...orchestration.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)


def _merge_usage(total: Dict[str, Any], usage: Dict[str, Any]) -> None:
    for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
        value = usage.get(key)
        if isinstance(value, int):
            total[key] = total.get(key, 0) + value


class AgentRunner:
    """
    Drives a conversation between one provider and a fixed tool set.

    Each iteration sends the whole history to the provider once. Tool
    invocations are executed and their results appended before the next
    iteration; a plain-text response ends the run.
    """

    def __init__(
        self,
        provider: ProviderAdapter,
        registry: ToolRegistry,
        options: Optional[AgentOptions] = None,
        name: str = "agent"
    ) -> None:
        self.provider = provider
        self.registry = registry
        self.options = options or AgentOptions()
        self.name = name

    async def run(self, prompt: str, options: Optional[AgentOptions] = None) -> AgentResult:
        """
        Run the loop until the model answers in text.

        Raises:
            BudgetExceeded: Iteration or wall-clock ceiling reached
            ProviderError: The provider failed terminally
            ConfigurationError, FatalToolError: A tool failed fatally
        """
        opts = options or self.options
        start = time.time()
        task = asyncio.create_task(self._run_loop(prompt, opts, start), name=f"agent:{self.name}")
        try:
            done, _ = await asyncio.wait({task}, timeout=opts.timeout_seconds)
        finally:
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task not in done:
            elapsed = round(time.time() - start, 3)
            logger.error(f"[{self.name}] Run exceeded {opts.timeout_seconds}s")
            raise BudgetExceeded("time", opts.timeout_seconds, elapsed, agent=self.name)
        # Timeouts raised by the provider itself surface unchanged
        return task.result()

    async def _run_loop(self, prompt: str, opts: AgentOptions, start: float) -> AgentResult:
        run = RunState()
        if opts.system_prompt:
            run.turns.append(ConversationTurn.system(opts.system_prompt))
        run.turns.append(ConversationTurn.user(prompt))

        executor = ToolExecutor(self.registry, concurrent=opts.concurrent_tools)
        tool_definitions = self.registry.definitions() or None
        usage: Dict[str, Any] = {}

        logger.info(f"[{self.name}] Starting run with provider {self.provider.name}")
        try:
            while True:
                if run.iterations >= opts.max_iterations:
                    logger.error(f"[{self.name}] Iteration ceiling of {opts.max_iterations} reached")
                    raise BudgetExceeded("iterations", opts.max_iterations, run.iterations, agent=self.name)

                run.iterations += 1
                response = await self.provider.generate(list(run.turns), tool_definitions, opts.params)
                _merge_usage(usage, response.usage)
                turn = response.turn

                if not turn.has_tool_invocations:
                    run.turns.append(turn)
                    run.transition(AgentState.DONE)
                    logger.info(
                        f"[{self.name}] Completed after {run.iterations} iterations",
                        extra={"tool_calls": run.tool_calls, "provider": response.provider}
                    )
                    return AgentResult(
                        content=turn.text or "",
                        iterations=run.iterations,
                        tool_calls=run.tool_calls,
                        transcript=run.turns,
                        elapsed_ms=int((time.time() - start) * 1000),
                        provider=response.provider,
                        model=response.model,
                        usage=usage,
                    )

                run.transition(AgentState.EXECUTING_TOOLS)
                run.turns.append(turn)
                logger.info(
                    f"[{self.name}] Iteration {run.iterations}: executing "
                    f"{', '.join(i.tool_name for i in turn.tool_invocations)}"
                )
                results = await executor.execute_invocations(turn.tool_invocations)
                run.turns.extend(results)
                run.tool_calls += len(results)
                run.transition(AgentState.AWAITING_MODEL)
        except BaseException:
            run.fail()
            raise

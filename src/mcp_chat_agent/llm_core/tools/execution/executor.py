"""Execute model-issued tool calls, holding back the ones that need user approval."""

from __future__ import annotations

import asyncio
import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from ..models import ToolCallRequest, ToolCallResult, ToolDescriptor
from ..registry import ToolRegistry
from ..remote import extract_text
from ...exceptions import SchemaMismatch, ToolExecutionError
from ...logger import get_logger
from ...messages import ToolInvocation

logger = get_logger(__name__)


class ToolExecutor:
    """Confirmation-gated executor for one conversation turn.

    Tools with an executor run immediately when the model calls them. Tools
    declared without one (the confirmation-gated set) produce a pending
    result and no network call; they only run through ``execute_confirmed``
    once the user approved the specific invocation.

    Every failure at this boundary becomes an ``"Error: ..."`` text result so
    the model can react to it on its next step.
    """

    def __init__(
        self,
        *,
        registry: ToolRegistry,
        confirmed_executors: Optional[Mapping[str, Callable[..., Awaitable[str]]]] = None,
        tool_timeout: float = 180.0,
    ) -> None:
        """Initialize the executor.

        Args:
            registry: All tools declared to the model for this turn.
            confirmed_executors: Executors for confirmation-gated tools, keyed by name.
            tool_timeout: Timeout in seconds for a single tool execution.
        """
        self._registry = registry
        self._confirmed_executors = dict(confirmed_executors or {})
        self._tool_timeout = tool_timeout

    def requires_confirmation(self, tool_name: str) -> bool:
        tool = self._registry.tools.get(tool_name)
        return tool is not None and (tool.requires_confirmation or tool.func is None)

    async def execute(self, request: ToolCallRequest) -> ToolCallResult:
        """Handle one tool call issued by the model.

        Args:
            request: The normalized call.

        Returns:
            The textual result, or a pending result for confirmation-gated tools.
        """
        logger.debug(f"Handling tool call: {request.name} (ID: {request.call_id})")

        tool = self._registry.tools.get(request.name)
        if tool is None:
            msg = f"Tool '{request.name}' not found in registry."
            logger.warning(msg)
            return self._error(request.name, request.call_id, msg)

        if self.requires_confirmation(request.name):
            logger.info("Tool '%s' (ID: %s) awaits user confirmation.", request.name, request.call_id)
            return ToolCallResult(name=request.name, call_id=request.call_id, pending=True)

        return await self._validate_and_run(tool, tool.func, request.arguments, request.call_id)

    async def execute_confirmed(self, invocation: ToolInvocation) -> ToolCallResult:
        """Run an approved confirmation-gated invocation with its original arguments.

        Args:
            invocation: The invocation the user approved.

        Returns:
            The textual result.
        """
        executor = self._confirmed_executors.get(invocation.name)
        tool = self._registry.tools.get(invocation.name)
        if executor is None or tool is None:
            msg = f"Tool '{invocation.name}' is no longer offered by the tool server."
            logger.warning(msg)
            return self._error(invocation.name, invocation.call_id, msg)

        logger.info("Executing approved tool '%s' (ID: %s).", invocation.name, invocation.call_id)
        return await self._validate_and_run(tool, executor, invocation.arguments, invocation.call_id)

    async def _validate_and_run(
        self, tool: ToolDescriptor, func: Any, raw_args: Any, call_id: str
    ) -> ToolCallResult:
        try:
            function_args = self.normalize_arguments(tool.name, raw_args)
            function_args = tool.parameters.validate_arguments(function_args)
        except (ToolExecutionError, SchemaMismatch) as exc:
            logger.warning(f"Invalid arguments for '{tool.name}': {exc}")
            return self._error(tool.name, call_id, str(exc))

        try:
            logger.info(f"Executing tool '{tool.name}'...")
            output = await self._execute_tool(func, function_args)
        except Exception as exc:
            logger.error("Error calling tool '%s': %s (%s)", tool.name, exc, type(exc).__name__)
            return self._error(tool.name, call_id, str(exc))

        logger.info(f"Tool '{tool.name}' executed successfully.")
        text = output if isinstance(output, str) else extract_text(output)
        return ToolCallResult(name=tool.name, call_id=call_id, output=text)

    @staticmethod
    def normalize_arguments(tool_name: str, raw_args: Any) -> Dict[str, Any]:
        """Normalize tool arguments into a dictionary.

        Handles JSON strings, mappings, or None values.

        Args:
            tool_name: Name of the tool (for error reporting).
            raw_args: The raw arguments.

        Returns:
            A dictionary of arguments.

        Raises:
            ToolExecutionError: If arguments cannot be parsed into an object.
        """
        if raw_args is None or raw_args == "":
            return {}

        if isinstance(raw_args, Mapping):
            return dict(raw_args)

        if isinstance(raw_args, str):
            try:
                parsed = json.loads(raw_args)
            except json.JSONDecodeError as exc:
                raise ToolExecutionError(f"Failed to parse arguments for tool '{tool_name}': {exc}") from exc

            if parsed is None:
                return {}
            if not isinstance(parsed, dict):
                raise ToolExecutionError(
                    f"Failed to parse arguments for tool '{tool_name}': arguments must decode to a JSON object."
                )
            return parsed

        raise ToolExecutionError(
            f"Failed to parse arguments for tool '{tool_name}': unsupported type {type(raw_args).__name__}."
        )

    async def _execute_tool(self, tool_function: Any, function_args: Dict[str, Any]) -> Any:
        """Execute the tool function, handling async/sync and timeouts.

        Raises:
            ToolExecutionError: If execution times out.
        """
        try:
            if inspect.iscoroutinefunction(tool_function):
                return await asyncio.wait_for(tool_function(**function_args), timeout=self._tool_timeout)

            return await asyncio.wait_for(
                asyncio.to_thread(tool_function, **function_args),
                timeout=self._tool_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ToolExecutionError(f"Tool execution timed out after {self._tool_timeout} seconds.") from exc

    @staticmethod
    def _error(name: str, call_id: str, cause: str) -> ToolCallResult:
        return ToolCallResult(name=name, call_id=call_id, output=f"Error: {cause}", is_error=True)

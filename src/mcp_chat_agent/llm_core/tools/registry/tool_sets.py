"""Partition advertised tools into auto-executing and confirmation-gated sets."""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterable, Type

from .base import ToolRegistry
from ..remote import RemoteTool, RemoteToolCaller, remote_executor
from ..models import ConfirmationList, ToolDescriptor
from ..schema import SchemaValidator, translate_input_schema
from ...logger import get_logger

logger = get_logger(__name__)


@dataclass
class ToolSets:
    """Tools available for one conversation turn.

    Attributes:
        auto_tools: Tools that run as soon as the model calls them.
        confirm_tools: Tools declared to the model without an executor.
        confirmed_executors: Remote executors for ``confirm_tools``, used only
            after the user approved a specific invocation.
        confirmation_list: The list the partition was based on.
    """

    auto_tools: ToolRegistry
    confirm_tools: ToolRegistry
    confirmed_executors: Dict[str, Callable[..., Awaitable[str]]] = field(default_factory=dict)
    confirmation_list: ConfirmationList = field(default_factory=ConfirmationList)

    def all_tools(self) -> ToolRegistry:
        return self.auto_tools.merge(self.confirm_tools)


def describe_remote_tool(tool: RemoteTool) -> ToolDescriptor:
    """Translate an advertised tool into a descriptor without executor."""
    description = tool.description or f"Tool {tool.name} provided by the tool server."
    return ToolDescriptor(
        name=tool.name,
        description=description,
        parameters=translate_input_schema(tool.input_schema, tool_name=tool.name),
        input_schema=SchemaValidator.prepare_input_schema(tool.input_schema),
    )


def build_tool_sets(
    remote_tools: Iterable[RemoteTool],
    caller: RemoteToolCaller,
    confirmation_list: ConfirmationList,
    registry_cls: Type[ToolRegistry],
) -> ToolSets:
    """Build the auto and confirm tool sets for one turn.

    Membership in ``confirmation_list`` is the only thing deciding which set a
    tool lands in. Duplicate names overwrite earlier entries.

    Args:
        remote_tools: Tools advertised by the server, in listing order.
        caller: Live connection the executors call through.
        confirmation_list: Names of tools that need approval.
        registry_cls: Concrete registry type to build.

    Returns:
        The partitioned tool sets.
    """
    auto_tools = registry_cls()
    confirm_tools = registry_cls()
    confirmed_executors: Dict[str, Callable[..., Awaitable[str]]] = {}

    for tool in remote_tools:
        descriptor = describe_remote_tool(tool)
        if confirmation_list.requires_confirmation(tool.name):
            confirm_tools.register(descriptor.model_copy(update={"requires_confirmation": True}))
            confirmed_executors[tool.name] = remote_executor(caller, tool.name)
        else:
            auto_tools.register(descriptor.model_copy(update={"func": remote_executor(caller, tool.name)}))

    logger.info(
        "Built tool sets: %d auto-executing, %d requiring confirmation.", len(auto_tools), len(confirm_tools)
    )
    return ToolSets(
        auto_tools=auto_tools,
        confirm_tools=confirm_tools,
        confirmed_executors=confirmed_executors,
        confirmation_list=confirmation_list,
    )

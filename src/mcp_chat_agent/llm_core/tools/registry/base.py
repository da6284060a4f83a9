"""Tool registry abstraction and helper utilities."""

import inspect
from abc import ABC, abstractmethod
from typing import Annotated, Any, Callable, Dict, Iterator, List, Optional, Union, cast, get_args, get_origin

from pydantic import create_model

from ..models import ToolDescriptor
from ..schema import ParameterKind, ParameterSchema, SchemaValidator
from ...exceptions import ToolNotFoundError, ToolRegistrationError, ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_ANNOTATION_KINDS = {
    str: ParameterKind.STRING,
    int: ParameterKind.NUMBER,
    float: ParameterKind.NUMBER,
    bool: ParameterKind.BOOLEAN,
}


def _unwrap_annotated(annotation: Any) -> Any:
    if get_origin(annotation) is Annotated:
        return get_args(annotation)[0]
    return annotation


class ToolRegistry(ABC):
    """
    Mapping from tool name to ``ToolDescriptor``.

    Registering a name twice replaces the earlier entry (last wins); tool
    servers are allowed to advertise duplicates.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self.tools: Dict[str, ToolDescriptor] = {}

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.tools.values())

    def __len__(self) -> int:
        return len(self.tools)

    def register(
        self,
        name_or_tool: Union[ToolDescriptor, Callable],
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ToolDescriptor:
        """
        Register a tool.

        Args:
            name_or_tool: A ready ``ToolDescriptor`` or a callable to introspect.
            name: Name override when registering a callable.
            description: Description override when registering a callable.

        Returns:
            The registered descriptor.

        Raises:
            ToolRegistrationError: If the argument is neither a descriptor nor callable.
            ToolValidationError: If a callable has no docstring and no description was given.
        """
        if isinstance(name_or_tool, ToolDescriptor):
            tool = name_or_tool
        elif callable(name_or_tool):
            tool = self._describe_callable(name_or_tool, name=name, description=description)
        else:
            raise ToolRegistrationError(f"Cannot register {name_or_tool!r} as a tool.")

        if tool.name in self.tools:
            logger.warning("Tool '%s' registered twice; the later definition replaces the earlier one.", tool.name)

        self.tools[tool.name] = tool
        logger.info(f"Successfully registered tool: '{tool.name}'")
        return tool

    def unregister(self, tool_name: str) -> None:
        """Unregister a tool from the registry.

        Args:
            tool_name: The name of the tool to remove.

        Raises:
            ToolNotFoundError: If the tool does not exist in the registry.
        """
        if tool_name not in self.tools:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.")
        del self.tools[tool_name]
        logger.info(f"Successfully unregistered tool: '{tool_name}'")

    def get(self, tool_name: str) -> ToolDescriptor:
        """Return the descriptor for ``tool_name``.

        Raises:
            ToolNotFoundError: If the tool is unknown.
        """
        try:
            return self.tools[tool_name]
        except KeyError:
            raise ToolNotFoundError(f"Tool '{tool_name}' not found in the registry.") from None

    def tool(self, func: Callable) -> Callable:
        """A decorator to turn a function into a tool.

        Args:
            func: The function to decorate.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    def merge(self, *others: "ToolRegistry") -> "ToolRegistry":
        """Return a new registry of the same type holding this registry's tools and then ``others``'.

        Later registries win on name clashes.
        """
        merged = type(self)()
        for registry in (self, *others):
            merged.tools.update(registry.tools)
        return merged

    @property
    def names(self) -> List[str]:
        return list(self.tools)

    @property
    @abstractmethod
    def tool_object(self) -> Any:
        """Constructs the tool declarations specific to the LLM provider.

        Returns:
            The provider-specific tool representation.
        """
        pass

    @property
    def implementations(self) -> Dict[str, Callable]:
        """Executors of the tools that have one, keyed by tool name."""
        return {name: tool.func for name, tool in self.tools.items() if tool.func is not None}

    @staticmethod
    def _describe_callable(
        func: Callable, name: Optional[str] = None, description: Optional[str] = None
    ) -> ToolDescriptor:
        """Build a descriptor from a function's signature and docstring.

        The model-facing schema comes from a pydantic model built over the
        signature, so ``Optional``, ``Annotated`` descriptions and model types
        are declared faithfully. For argument validation, ``str``,
        ``int``/``float`` and ``bool`` (also inside ``Annotated``) map to their
        kinds and everything else is ``ANY``. Parameters with defaults are optional.

        Raises:
            ToolValidationError: If no description is available.
        """
        tool_name = name or func.__name__
        if description is None:
            description = inspect.getdoc(func)
        if not description:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)

        kinds: Dict[str, ParameterKind] = {}
        optional = set()
        fields: Dict[str, Any] = {}
        for param_name, param in inspect.signature(func).parameters.items():
            if param_name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
            kinds[param_name] = _ANNOTATION_KINDS.get(_unwrap_annotated(annotation), ParameterKind.ANY)
            if param.default is inspect.Parameter.empty:
                fields[param_name] = (annotation, ...)
            else:
                fields[param_name] = (annotation, param.default)
                optional.add(param_name)

        params_model = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
        input_schema = SchemaValidator.prepare_input_schema(params_model.model_json_schema())

        return ToolDescriptor(
            name=tool_name,
            description=description,
            parameters=ParameterSchema(tool_name=tool_name, parameters=kinds, optional=frozenset(optional)),
            input_schema=input_schema,
            func=func,
        )

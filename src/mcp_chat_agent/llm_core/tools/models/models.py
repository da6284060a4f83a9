from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field

from ..schema import ParameterSchema


class ToolDescriptor(BaseModel):
    """
    Represents a tool that can be declared to the model.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        parameters: Validator for the call arguments.
        input_schema: JSON schema of the arguments, as declared to the model.
        func: Optional executor (sync or async) returning the textual result.
              Confirmation-gated tools have none.
        requires_confirmation: Whether a human must approve each call first.
    """

    name: str
    description: str
    parameters: ParameterSchema = Field(default_factory=ParameterSchema)
    input_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    func: Optional[Callable[..., Any]] = None
    requires_confirmation: bool = False

    @property
    def is_executable(self) -> bool:
        return self.func is not None

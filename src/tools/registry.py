from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Tuple, Type

from langchain_core.tools import BaseTool
from pydantic import BaseModel

from utils.errors import UnknownToolError


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[Dict[str, Any]], Any]

    @property
    def input_shape(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema()

    def listing(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_shape}

    @classmethod
    def from_tool(cls, lc_tool: BaseTool) -> "ToolDescriptor":
        """Wrap a langchain tool; its args_schema is the input shape."""
        if lc_tool.args_schema is None or not isinstance(lc_tool.args_schema, type):
            raise ValueError(f"tool {lc_tool.name} has no pydantic args_schema")
        return cls(
            name=lc_tool.name,
            description=(lc_tool.description or "").strip(),
            input_model=lc_tool.args_schema,
            handler=lc_tool.invoke,
        )


class ToolRegistry:
    """Name -> descriptor mapping, fixed at construction."""

    def __init__(self, descriptors: Iterable[ToolDescriptor]) -> None:
        items: List[Tuple[str, ToolDescriptor]] = []
        seen = set()
        for d in descriptors:
            if d.name in seen:
                raise ValueError(f"duplicate tool name: {d.name}")
            seen.add(d.name)
            items.append((d.name, d))
        self._ordered: Tuple[ToolDescriptor, ...] = tuple(d for _, d in items)
        self._by_name: Dict[str, ToolDescriptor] = dict(items)

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        return self._ordered

    def resolve(self, name: str) -> ToolDescriptor:
        try:
            return self._by_name[name]
        except (KeyError, TypeError):
            raise UnknownToolError(name) from None

    def describe(self) -> List[Dict[str, Any]]:
        return [d.listing() for d in self._ordered]

    def __len__(self) -> int:
        return len(self._ordered)


def build_registry() -> ToolRegistry:
    from tools.cloud_arch import design_azure_architecture

    return ToolRegistry([ToolDescriptor.from_tool(design_azure_architecture)])

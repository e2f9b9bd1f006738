from typing import Any, Dict, List, Mapping

import structlog
from pydantic import ValidationError

from models.envelope import ResponseEnvelope
from tools.registry import ToolRegistry
from utils.errors import UnknownToolError

logger = structlog.get_logger(__name__)


def _validation_details(exc: ValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(p) for p in err.get("loc", ())) or "arguments", "message": err.get("msg", "")}
        for err in exc.errors()
    ]


class RequestDispatcher:
    """
    Turns (tool name, arguments) into exactly one ResponseEnvelope.

    This is the only place handler failures are converted into envelopes;
    nothing raised by a handler reaches the transports.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    def dispatch(self, name: str, arguments: Any) -> ResponseEnvelope:
        try:
            descriptor = self.registry.resolve(name)
        except UnknownToolError as e:
            logger.warning("Unknown tool requested", tool=name)
            return ResponseEnvelope.text(str(e), is_error=True)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            logger.info("Rejected non-object arguments", tool=name)
            return ResponseEnvelope.failure(
                f"Invalid arguments for {name}: expected an object",
                details=[{"field": "arguments", "message": "Input should be an object"}],
            )

        try:
            descriptor.input_model.model_validate(arguments)
        except ValidationError as e:
            logger.info("Rejected invalid arguments", tool=name, errors=e.error_count())
            return ResponseEnvelope.failure(
                f"Invalid arguments for {name}: {e.error_count()} validation error(s)",
                details=_validation_details(e),
            )

        try:
            out = descriptor.handler(dict(arguments))
            envelope = out if isinstance(out, ResponseEnvelope) else ResponseEnvelope.model_validate(out)
        except Exception as e:
            logger.error("Tool handler failed", tool=name, error=str(e), exc_info=True)
            return ResponseEnvelope.failure(str(e))

        logger.debug("Tool dispatched", tool=name, is_error=envelope.isError)
        return envelope

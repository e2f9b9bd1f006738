"""Shared fixtures for the server test suite."""

from __future__ import annotations

import time
from typing import Any, Dict

import pytest
from pydantic import BaseModel

from models.envelope import ResponseEnvelope
from services.dispatcher import RequestDispatcher
from services.protocol import McpProtocol
from sse.session_manager import SessionManager
from tools.registry import ToolDescriptor, ToolRegistry, build_registry
from utils.logger import reset_logging


class EchoInput(BaseModel):
    value: str
    delay: float = 0.0


def _echo(args: Dict[str, Any]) -> ResponseEnvelope:
    if args.get("delay"):
        time.sleep(args["delay"])
    return ResponseEnvelope.text(args["value"])


def _explode(args: Dict[str, Any]) -> ResponseEnvelope:
    raise RuntimeError("boom")


ECHO = ToolDescriptor(name="echo", description="Echo a value", input_model=EchoInput, handler=_echo)
EXPLODE = ToolDescriptor(name="explode", description="Always fails", input_model=EchoInput, handler=_explode)


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def dispatcher(registry):
    return RequestDispatcher(registry)


@pytest.fixture
def protocol(dispatcher):
    return McpProtocol(dispatcher)


@pytest.fixture
def echo_protocol():
    """Protocol over the test-only echo/explode tools."""
    return McpProtocol(RequestDispatcher(ToolRegistry([ECHO, EXPLODE])))


@pytest.fixture
def manager(protocol):
    return SessionManager(protocol, keepalive_seconds=5)


@pytest.fixture
def first_question():
    return {
        "question": "What is your primary workload?",
        "questionNumber": 1,
        "totalQuestions": 8,
        "nextQuestionNeeded": True,
        "state": {},
    }


@pytest.fixture
def populated_state():
    return {
        "questionHistory": [{"question": "What is your primary workload?", "answer": "web app"}],
        "followUpQuestions": {"1": [{"question": "Expected peak traffic?"}]},
        "architectureComponents": ["Azure App Service", "Azure SQL Database"],
        "identifiedRequirements": ["99.9% availability"],
        "technicalConstraints": [],
        "designPatterns": ["CQRS"],
        "serviceTiers": {
            "infrastructure": [],
            "platform": ["Azure App Service"],
            "application": [],
            "data": ["Azure SQL Database"],
            "security": [],
            "operations": [],
        },
        "calculatedMetrics": {
            "emptyTiers": ["infrastructure", "application", "security", "operations"],
            "completenessPercentage": 33,
            "tierComponentCounts": {"platform": 1, "data": 1},
        },
        "display": {"displayText": "How many users do you expect?"},
        "customClientField": {"nested": [3, 2, 1], "z": None, "a": {"b": True}},
    }


@pytest.fixture(autouse=True)
def _isolated_logging():
    """Drop any logging configuration a test installed, including via main.main."""
    yield
    reset_logging()

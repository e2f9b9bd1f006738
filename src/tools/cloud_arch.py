import json
from typing import Any, Dict, List

from langchain_core.tools import tool

from models.architecture import ArchitectureInquiryInput
from models.envelope import ResponseEnvelope

TOOL_NAME = "design_azure_architecture"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _count(value: Any) -> int:
    return len(value) if isinstance(value, list) else 0


def _display_text(state: Dict[str, Any], question: str) -> str:
    text = _as_dict(state.get("display")).get("displayText")
    return text if isinstance(text, str) and text else question


def architecture_status(state: Dict[str, Any]) -> Dict[str, Any]:
    """Read-only summary of the caller's state. Missing pieces fall back to empty values."""
    metrics = _as_dict(state.get("calculatedMetrics"))
    empty_tiers = metrics.get("emptyTiers")
    tier_counts = metrics.get("tierComponentCounts")
    return {
        "componentsCount": _count(state.get("architectureComponents")),
        "requirementsCount": _count(state.get("identifiedRequirements")),
        "constraintsCount": _count(state.get("technicalConstraints")),
        "designPatternsCount": _count(state.get("designPatterns")),
        "completenessPercentage": metrics.get("completenessPercentage") or 0,
        "emptyTiers": empty_tiers if isinstance(empty_tiers, list) else [],
        "tierComponentCounts": tier_counts if isinstance(tier_counts, dict) else {},
    }


def build_payload(args: ArchitectureInquiryInput) -> Dict[str, Any]:
    state = args.state
    inquiry = args.model_dump(exclude={"state"}, exclude_none=True)
    follow_ups: List[str] = list(_as_dict(state.get("followUpQuestions")).keys())
    return {
        "display_text": _display_text(state, args.question),
        "questionNumber": args.questionNumber,
        "totalQuestions": args.totalQuestions,
        "nextQuestionNeeded": args.nextQuestionNeeded,
        "followUpQuestions": follow_ups,
        "questionHistoryLength": _count(state.get("questionHistory")),
        "architectureStatus": architecture_status(state),
        "inquiry": inquiry,
        "state": state,
    }


@tool(args_schema=ArchitectureInquiryInput)
def design_azure_architecture(**kwargs) -> ResponseEnvelope:
    """
    Design an Azure cloud architecture through an iterative questioning process.

    Each call is one step of a requirements conversation led by the caller acting
    as a senior Azure solutions architect: ask a question, record the answer,
    identify requirements and constraints, suggest components per tier
    (infrastructure, platform, application, data, security, operations) and
    design patterns, and set nextQuestionNeeded to false once the design is complete.

    The server is stateless. The caller owns the whole architecture state
    (questionHistory, followUpQuestions, architectureComponents,
    identifiedRequirements, technicalConstraints, designPatterns, serviceTiers,
    calculatedMetrics, display) and must send it on every call; it is returned
    unchanged alongside a summary of the current step.

    Between calls the caller updates the state itself: append each inquiry to
    questionHistory, add any requirementIdentified, technicalConstraint,
    designPatternSuggested or architectureComponent to its list, file components
    under serviceTiers by architectureTier, then recompute calculatedMetrics
    (emptyTiers, completenessPercentage, tierComponentCounts) and set
    display.displayText to the next question to show.
    """
    args = ArchitectureInquiryInput(**kwargs)
    payload = build_payload(args)
    return ResponseEnvelope.text(json.dumps(payload, indent=2, ensure_ascii=False))

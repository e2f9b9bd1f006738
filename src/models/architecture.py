from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

ArchitectureTier = Literal["infrastructure", "platform", "application", "data", "security", "operations"]


class ServiceDetails(BaseModel):
    name: str = Field(..., strict=True, description="Name of the Azure service")
    purpose: str = Field(..., strict=True, description="Purpose of this service in the architecture")
    configuration: Optional[str] = Field(
        None, strict=True, description="Recommended configuration details"
    )
    alternatives: Optional[List[str]] = Field(
        None, description="Alternative Azure services that could be used"
    )


class ArchitectureInquiryInput(BaseModel):
    """
    One step of the Azure architecture requirements conversation. Field names follow the wire
    format (camelCase) so the model validates caller payloads as-is.
    """

    question: str = Field(..., strict=True, description="The current question being asked")
    questionNumber: int = Field(..., strict=True, ge=1, description="Current question number")
    totalQuestions: int = Field(..., strict=True, ge=1, description="Estimated total questions needed")
    nextQuestionNeeded: bool = Field(..., strict=True, description="Whether another question is needed")
    state: Dict[str, Any] = Field(
        ...,
        strict=True,
        description=(
            "The complete architecture state from the previous call, owned by the caller. "
            "Keys: questionHistory (list of prior inquiries), followUpQuestions (list), "
            "architectureComponents (list), identifiedRequirements (list), "
            "technicalConstraints (list), designPatterns (list), "
            "serviceTiers (map of tier name to list of components), "
            "calculatedMetrics (object with emptyTiers, completenessPercentage, "
            "tierComponentCounts), display (object with displayText). "
            "Send an empty object on the first call."
        ),
    )
    answer: Optional[str] = Field(None, strict=True, description="The user's response to the question")
    requirementCategory: Optional[str] = Field(
        None, strict=True, description="Category for organizing requirements (e.g. security, cost)"
    )
    isFollowUp: Optional[bool] = Field(
        None, strict=True, description="Whether this is a follow-up to a previous question"
    )
    followsQuestionNumber: Optional[int] = Field(
        None, strict=True, ge=1, description="Question number this follows up on"
    )
    architectureSuggested: Optional[bool] = Field(
        None, strict=True, description="Whether this suggests an architecture component"
    )
    architectureComponent: Optional[str] = Field(
        None, strict=True, description="Specific Azure component being suggested"
    )
    detailLevel: Optional[Literal["high", "medium", "low"]] = Field(
        None, description="Level of detail for this component or question"
    )
    domainSpecific: Optional[bool] = Field(
        None, strict=True, description="Whether this relates to a specific domain (e.g. healthcare)"
    )
    requirementIdentified: Optional[str] = Field(
        None, strict=True, description="Specific requirement identified from user responses"
    )
    technicalConstraint: Optional[str] = Field(
        None, strict=True, description="Technical constraint identified that impacts architecture"
    )
    designPatternSuggested: Optional[str] = Field(
        None, strict=True, description="Architectural pattern being recommended"
    )
    serviceDetails: Optional[ServiceDetails] = Field(
        None, description="Detailed information about a specific Azure service"
    )
    architectureTier: Optional[ArchitectureTier] = Field(
        None, description="Which architectural tier this component belongs to"
    )

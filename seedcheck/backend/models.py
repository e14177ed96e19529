from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    # Wire format keeps the camelCase keys the frontend and the model prompt use.
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Founder(CamelModel):
    name: str = ""
    role: str = ""
    background: str = ""


class ParsedSlide(CamelModel):
    slide_number: int = Field(alias="slideNumber")
    content: str


class ParsedDeck(CamelModel):
    file_name: str = Field(alias="fileName")
    file_type: Literal["pdf", "pptx"] = Field(alias="fileType")
    slide_count: int = Field(alias="slideCount")
    slides: List[ParsedSlide]
    raw_text: str = Field(alias="rawText")


class DimensionScore(CamelModel):
    name: str
    score: int
    max_score: int = Field(default=25, alias="maxScore")
    summary: str
    whats_working: List[str] = Field(alias="whatsWorking")
    whats_missing: List[str] = Field(alias="whatsMissing")
    priority_fix: str = Field(alias="priorityFix")
    investor_lens: str = Field(alias="investorLens")


class AnalysisResult(CamelModel):
    overall_score: int = Field(alias="overallScore")
    label: str
    dimensions: List[DimensionScore]
    narrative: str
    top_recommendations: List[str] = Field(alias="topRecommendations")
    mode: Literal["demo", "live"]

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class AnalyzeRequest(CamelModel):
    questionnaire: Optional[Dict[str, Any]] = None
    deck_content: Optional[str] = Field(default=None, alias="deckContent")


class HealthResponse(BaseModel):
    status: str
    mode: Literal["demo", "live"]

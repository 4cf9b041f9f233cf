from typing import Optional

from pydantic import AliasChoices, Field

from schemas.base import CamelModel


class AnalysisSave(CamelModel):
    """Credit analyst documents and narrative. Omitted fields are left untouched."""

    application_reference_number: Optional[str] = None
    financial_profile_url: Optional[str] = None
    pestel_analysis_url: Optional[str] = None
    swot_analysis_url: Optional[str] = None
    risk_assessment_url: Optional[str] = None
    esg_assessment_url: Optional[str] = None
    financial_need_url: Optional[str] = None
    analyst_conclusion: Optional[str] = None
    analyst_recommendation: Optional[str] = None
    rm_recommendation: Optional[str] = None
    # Lifecycle action to run in the same transaction once saved, e.g. "save" or "rev"
    transition: Optional[str] = None


class ReviewSave(CamelModel):
    """Supervisor scoring. Scores outside 0-100 are clamped; the overall score is computed server side.

    The legacy frontend key spellings (``pestelanalysisScore`` ...) are accepted as well.
    """

    application_reference_number: str = Field(..., min_length=1)
    pestel_analysis_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("pestelAnalysisScore", "pestelanalysisScore", "pestel_analysis_score")
    )
    swot_analysis_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("swotAnalysisScore", "swotanalysisScore", "swot_analysis_score")
    )
    risk_assessment_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("riskAssessmentScore", "riskassesmentScore", "risk_assessment_score")
    )
    esg_assessment_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("esgAssessmentScore", "esgassesmentScore", "esg_assessment_score")
    )
    financial_need_score: Optional[float] = Field(
        None, validation_alias=AliasChoices("financialNeedScore", "financialneedScore", "financial_need_score")
    )
    review_notes: Optional[str] = None
    decision: Optional[str] = None
    transition: Optional[str] = None

    def scores(self) -> list[Optional[float]]:
        return [
            self.pestel_analysis_score,
            self.swot_analysis_score,
            self.risk_assessment_score,
            self.esg_assessment_score,
            self.financial_need_score,
        ]

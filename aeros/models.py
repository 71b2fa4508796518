from pydantic import BaseModel, ConfigDict, Field


class PollutantSnapshot(BaseModel):
    NO2: float | None = None
    O3: float | None = None
    PM: float | None = None
    CH2O: float | None = None
    AI: float | None = None


class StateRecommendationRequest(BaseModel):
    fips: str | None = None
    user_text: str | None = None
    tags: list[str] = []
    tag_ids: list[int] = []
    country: str = "United States"
    date: str | None = None
    state_name: str | None = None
    pollutants: PollutantSnapshot | None = None


class ZipRecommendationRequest(BaseModel):
    zip: str | None = None
    user_text: str | None = None


class RecommendationScores(BaseModel):
    outdoor_suitability: float
    health_risk: float
    confidence: float


class RecommendationPlace(BaseModel):
    name: str = ""
    fips: str = ""
    country: str = ""
    date: str | None = None


class RecommendationModel(BaseModel):
    state: RecommendationPlace | None = None
    dominant_pollutant: str  # "NO2", "O3", "PM", "CH2O" or "Unknown"
    risk_level_label: str
    scores: RecommendationScores
    pollutants: PollutantSnapshot = PollutantSnapshot()
    tailored_notes: list[str] = []
    recommendations: list[str] = []
    indoor_alternatives: list[str] = []
    disclaimer: str = ""


class ProfileTag(BaseModel):
    tagId: int
    tagName: str
    tagType: str = ""


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    email: str = ""
    name: str = ""
    surname: str = ""
    zip_code: str | None = Field(default=None, alias="zipCode")
    tags: list[ProfileTag] = []

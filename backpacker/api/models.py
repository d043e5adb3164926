from __future__ import annotations

from enum import StrEnum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    country: str
    latitude: float
    longitude: float

    @property
    def label(self) -> str:
        return f"{self.city}, {self.country}"


TransportMode = Literal["Plane", "Train", "Bus"]


class TravelOption(Location):
    cost: int
    mode: TransportMode
    distance_km: float

    def as_location(self) -> Location:
        return Location(city=self.city, country=self.country, latitude=self.latitude, longitude=self.longitude)


class Job(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str = ""
    # The AI schema uses camelCase for this field.
    wikipedia_search_term: str = Field(..., alias="wikipediaSearchTerm")


class QuizQuestion(BaseModel):
    question: str
    options: list[str]
    answer: str


class QuizKind(StrEnum):
    location = "location"
    job = "job"


class Quiz(BaseModel):
    title: str
    kind: QuizKind
    questions: list[QuizQuestion]
    current_index: int = 0
    score: int = 0

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1


class AnswerFeedback(BaseModel):
    question: str
    chosen: str
    correct_answer: str
    correct: bool


class JobRecord(BaseModel):
    title: str
    score: int
    question_count: int
    earnings: int
    # True when the job trial could not be generated and a consolation was paid.
    pity: bool = False


class GamePhase(StrEnum):
    select_start_city = "select_start_city"
    location_quiz = "location_quiz"
    select_job = "select_job"
    job_quiz = "job_quiz"
    travel_planning = "travel_planning"
    game_over = "game_over"
    victory = "victory"


# ---- Requests ----


class SelectCityRequest(BaseModel):
    index: int = Field(..., ge=0)


class AnswerRequest(BaseModel):
    answer: str = Field(..., min_length=1)


class SelectJobRequest(BaseModel):
    index: int = Field(..., ge=0)


class SelectDestinationRequest(BaseModel):
    index: int = Field(..., ge=0)


# ---- Views ----


class MapMarker(BaseModel):
    latitude: float
    longitude: float
    label: str


class MapPolyline(BaseModel):
    points: list[tuple[float, float]]


class MapFocus(BaseModel):
    latitude: float = 20.0
    longitude: float = 0.0
    zoom: float = 2.5


class MapView(BaseModel):
    markers: list[MapMarker] = Field(default_factory=list)
    polylines: list[MapPolyline] = Field(default_factory=list)
    focus: MapFocus = Field(default_factory=MapFocus)


class PanelItem(BaseModel):
    action: Literal["select-city", "answer-quiz", "select-job", "select-destination", "restart"]
    index: int | None = None
    title: str
    subtitle: str | None = None
    description: str | None = None
    cost: int | None = None
    disabled: bool = False


class PanelView(BaseModel):
    title: str
    description: str
    question: str | None = None
    items: list[PanelItem] = Field(default_factory=list)


class DashboardView(BaseModel):
    status: str
    money: int | None = None
    location: str | None = None
    progress_percent: float = 0.0
    progress_text: str = "0°/360°"


class GameView(BaseModel):
    game_id: UUID
    phase: GamePhase
    dashboard: DashboardView
    panel: PanelView
    map: MapView
    last_answer: AnswerFeedback | None = None
    job_history: list[JobRecord] = Field(default_factory=list)


class CityListResponse(BaseModel):
    cities: list[Location]

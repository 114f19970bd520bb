import yaml
import os
from typing import Optional, Literal
from pydantic import BaseModel, Field


class ScheduleConfig(BaseModel):
    interval_seconds: int = 3600


class DatabaseConfig(BaseModel):
    url: str


class LlmConfig(BaseModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    completion_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: Optional[int] = None  # None = model default
    temperature: float = 0.3
    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    # Shared breaker for every LLM/embedding call made by this process
    circuit_breaker_threshold: int = 5
    circuit_breaker_reset_seconds: float = 60.0


class MatchingWeights(BaseModel):
    """
    Weights for the LLM attribute sub-scores.

    They should sum to 1.0, but the scorer uses them as given and never
    renormalizes. The API boundary calls validate_sum() before scoring.
    """
    skills: float = Field(default=0.4, ge=0.0)
    experience: float = Field(default=0.3, ge=0.0)
    location: float = Field(default=0.2, ge=0.0)
    company: float = Field(default=0.1, ge=0.0)

    def total(self) -> float:
        return self.skills + self.experience + self.location + self.company

    def validate_sum(self, tolerance: float = 0.1) -> "MatchingWeights":
        """Raise ValueError unless the weights sum to 1.0 within tolerance."""
        total = self.total()
        if abs(total - 1.0) > tolerance:
            raise ValueError(f"Weight preferences must sum to 1.0 (got {total:.2f})")
        return self


class MatchingConfig(BaseModel):
    """
    Configuration for match scoring.

    final = similarity_weight * similarity + weighted_weight * weighted
    """
    enabled: bool = True
    default_weights: MatchingWeights = Field(default_factory=MatchingWeights)

    similarity_weight: float = 0.3
    weighted_weight: float = 0.7

    # Bucket thresholds for batch summaries
    high_threshold: float = 0.8
    medium_threshold: float = 0.6
    low_threshold: float = 0.4

    # 1 = sequential, one posting at a time
    max_workers: int = 1

    # Number of top postings considered for matching insights
    insights_limit: int = 20


class TrackerConfig(BaseModel):
    """
    Configuration for application status reconciliation.
    """
    enabled: bool = True
    debounce_hours: float = 6.0
    min_days_before_prediction: int = 3

    enable_portal_check: bool = True
    enable_api_check: bool = True
    enable_prediction: bool = True

    # e.g. "https://ats.example.com/api/{company}/applications/{application_id}"
    ats_status_url: Optional[str] = None
    request_timeout_seconds: float = 30.0

    # "append" keeps previous notes, "overwrite" replaces them with the summary
    notes_mode: Literal["append", "overwrite"] = "append"

    delay_between_checks_seconds: float = 0.0
    lock_dir: str = "."


class WriterConfig(BaseModel):
    """Configuration for cover letter generation."""
    model: Optional[str] = None  # None = llm.completion_model
    temperature: float = 0.7
    default_tone: Literal["professional", "casual", "enthusiastic"] = "professional"
    default_length: Literal["short", "medium", "long"] = "medium"
    generate_variations: bool = False


class AppConfig(BaseModel):
    database: DatabaseConfig
    llm: LlmConfig = Field(default_factory=LlmConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the repo root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        data.setdefault('database', {})
        data['database']['url'] = env_db_url

    # Allow env var overrides for the LLM endpoint and key
    env_llm_base_url = os.environ.get("LLM_BASE_URL")
    if env_llm_base_url:
        if not data.get('llm'):
            data['llm'] = {}
        data['llm']['base_url'] = env_llm_base_url

    env_api_key = os.environ.get("OPENAI_API_KEY")
    if env_api_key:
        if not data.get('llm'):
            data['llm'] = {}
        data['llm'].setdefault('api_key', env_api_key)

    return AppConfig(**data)

"""Centralized configuration for code-context-search using Pydantic Settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from code_context_search.search.stats import CategoryWeights


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every variable is read with the ``CODE_SEARCH_`` prefix, e.g.
    ``CODE_SEARCH_MAX_RESULTS=20``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CODE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Ranking
    max_results: int = Field(default=10, ge=0, description="Default number of ranked results per search")
    scorer: Literal["cosine", "overlap"] = Field(
        default="cosine", description="Ranking function: TF-IDF cosine or weighted token overlap"
    )
    score_floor: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Minimum score a result must exceed; unset uses the scorer's own floor",
    )

    # Category weights applied to term frequencies
    class_weight: float = Field(default=3.0, gt=0.0, description="Weight of class-name tokens")
    method_weight: float = Field(default=2.0, gt=0.0, description="Weight of method-name tokens")
    package_weight: float = Field(default=1.0, gt=0.0, description="Weight of package tokens")
    import_weight: float = Field(default=0.5, gt=0.0, description="Weight of import tokens")

    # Tokenizer
    token_cache_size: int = Field(
        default=10_000,
        ge=0,
        description="Maximum distinct strings memoized by the tokenizer (0 disables caching)",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    def category_weights(self) -> CategoryWeights:
        """Return the per-category term weights as a value object."""
        return CategoryWeights(
            class_weight=self.class_weight,
            method_weight=self.method_weight,
            package_weight=self.package_weight,
            import_weight=self.import_weight,
        )

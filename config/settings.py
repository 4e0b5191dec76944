"""
Configuration management using Pydantic Settings.

Environment variables:
- LLM_PROVIDER: Structured-completion backend ('lmstudio', 'openai' or 'ollama')
- LLM_BASE_URL: Base URL of the OpenAI-compatible server (LM Studio, vLLM;
  https://api.openai.com/v1 for OpenAI itself)
- LLM_MODEL: Model name sent with every completion request
- USE_LLM: Enable the LLM extraction strategy (regex is used otherwise)
- OCR_SERVER_URL: Base URL of the vision OCR server
- DATABASE_URL: SQLAlchemy database URL for the audit store
- LOG_LEVEL: Root logging level
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import DEFAULT_LLM_PARAMS, DEFAULT_OCR_PARAMS, RECONSTRUCTION_PARAMS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Structured-completion backend
    llm_provider: str = Field(default="lmstudio")
    llm_base_url: str = Field(default="http://localhost:1234/v1")
    llm_api_key: Optional[str] = Field(default=None)
    llm_model: str = Field(default="local-model")
    llm_temperature: float = Field(default=DEFAULT_LLM_PARAMS['temperature'])
    llm_max_tokens: int = Field(default=DEFAULT_LLM_PARAMS['max_tokens'])
    llm_timeout: int = Field(default=120)
    llm_text_budget: int = Field(default=DEFAULT_LLM_PARAMS['text_budget'])

    # Feature toggles
    use_llm: bool = Field(default=True)
    auto_analyze: bool = Field(default=True)
    store_results: bool = Field(default=False)

    # Vision OCR server
    ocr_server_url: str = Field(default="http://localhost:8000/v1")
    ocr_api_key: str = Field(default="123")
    ocr_model: str = Field(default="ocr")
    ocr_max_tokens: int = Field(default=DEFAULT_OCR_PARAMS['max_tokens'])
    ocr_target_dpi: int = Field(default=DEFAULT_OCR_PARAMS['target_dpi'])
    ocr_max_image_size: int = Field(default=DEFAULT_OCR_PARAMS['max_image_size'])

    # Audit store
    database_url: str = Field(default="sqlite:///invoflow.db")

    log_level: str = Field(default="INFO")

    # Spatial reconstruction
    spatial_min_tolerance: float = Field(default=RECONSTRUCTION_PARAMS['min_tolerance'])
    spatial_tolerance_ratio: float = Field(default=RECONSTRUCTION_PARAMS['tolerance_ratio'])
    spatial_paragraph_gap_ratio: float = Field(default=RECONSTRUCTION_PARAMS['paragraph_gap_ratio'])
    spatial_column_gap_ratio: float = Field(default=RECONSTRUCTION_PARAMS['column_gap_ratio'])
    spatial_min_space_gap: float = Field(default=RECONSTRUCTION_PARAMS['min_space_gap'])

    def get_llm_config(self) -> dict:
        """Get LLM client configuration as dictionary."""
        return {
            'provider': self.llm_provider,
            'model': self.llm_model,
            'base_url': self.llm_base_url,
            'api_key': self.llm_api_key,
            'timeout': self.llm_timeout,
        }

    def get_reconstruction_params(self) -> dict:
        """Get spatial reconstruction tolerances as keyword arguments."""
        return {
            'min_tolerance': self.spatial_min_tolerance,
            'tolerance_ratio': self.spatial_tolerance_ratio,
            'paragraph_gap_ratio': self.spatial_paragraph_gap_ratio,
            'column_gap_ratio': self.spatial_column_gap_ratio,
            'min_space_gap': self.spatial_min_space_gap,
        }

    def get_ocr_params(self) -> dict:
        """Get OCR request parameters as dictionary."""
        return {
            'max_tokens': self.ocr_max_tokens,
            'target_dpi': self.ocr_target_dpi,
            'max_image_size': self.ocr_max_image_size,
        }


# Global settings instance
settings = Settings()

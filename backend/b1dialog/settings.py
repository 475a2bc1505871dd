from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Record store
	database_url: str = Field(default="sqlite:///./b1dialog.db", validation_alias="DATABASE_URL")
	# Optional: service credential injected into DATABASE_URL when it carries none
	database_password: str | None = Field(default=None, validation_alias="DATABASE_PASSWORD")

	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	gemini_timeout_seconds: float = Field(default=60, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# "workflow" (b1-start / b1-results / b1-progress) or "simple" (append-only b1_dialog_results)
	b1_results_mode: str = Field(default="workflow", validation_alias="B1_RESULTS_MODE")

	port: int = Field(default=8000, validation_alias="PORT")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

settings = Settings()

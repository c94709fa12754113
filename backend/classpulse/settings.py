from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	# Whole-PDF lesson plans routinely take 20-40s
	gemini_timeout_seconds: float = Field(default=60, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# Database ("sqlite://" is a single shared in-memory database)
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Uploaded lecture PDFs and rendered HTML output
	upload_dir: str = Field(default="./uploads", validation_alias="UPLOAD_DIR")
	output_dir: str = Field(default="./generated", validation_alias="OUTPUT_DIR")
	max_upload_mb: int = Field(default=50, validation_alias="MAX_UPLOAD_MB")
	default_num_items: int = Field(default=8, validation_alias="DEFAULT_NUM_ITEMS")
	generated_retention_days: int = Field(default=7, validation_alias="GENERATED_RETENTION_DAYS")

	# Lesson links embedded in QR codes; falls back to the request base URL
	public_base_url: str | None = Field(default=None, validation_alias="PUBLIC_BASE_URL")
	qr_width: int = Field(default=256, validation_alias="QR_WIDTH")
	qr_width_standalone: int = Field(default=512, validation_alias="QR_WIDTH_STANDALONE")

	cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()

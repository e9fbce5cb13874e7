from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 5000
    allowed_origin: str = "http://localhost:8501"

    # any OpenAI-compatible chat completions endpoint
    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = ""  # set it in the .env file
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.4
    llm_max_tokens: int = 2000
    llm_timeout_s: float = 120.0

    upload_dir: str = "/tmp/studydesk-uploads"
    max_upload_bytes: int = 10 * 1024 * 1024
    max_text_chars: int = 12000


settings = Settings()

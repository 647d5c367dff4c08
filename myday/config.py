from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Auth -- required, no fallback secret
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # LLM
    llm_provider: str = "siliconflow"
    llm_api_key: str = ""
    anthropic_api_key: str = ""
    llm_model: str = "Qwen/Qwen2.5-VL-72B-Instruct"
    llm_base_url: str = ""  # Overrides the provider's default endpoint
    llm_timeout_seconds: float = 60.0
    llm_temperature: float = 0.7

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = False

    # Category sweep
    category_sweep_enabled: bool = True
    category_sweep_interval_ms: int = 30000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

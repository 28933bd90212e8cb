from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Manages all application settings. It automatically reads from
    environment variables or a .env file.
    """
    # Tell pydantic to load variables from a .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Measurement (PPG) service
    USE_MOCK_PPG: bool = False
    PPG_SERVICE_URL: str = "http://localhost:8080"
    PPG_TIMEOUT_SECONDS: float = 5.0

    # Azure Translator
    AZURE_TRANSLATOR_KEY: str = ""
    AZURE_TRANSLATOR_ENDPOINT: str = "https://api.cognitive.microsofttranslator.com"
    AZURE_TRANSLATOR_REGION: str = "global"

    # Azure Speech
    AZURE_SPEECH_KEY: str = ""
    AZURE_SPEECH_REGION: str = "eastus"

    # Server bind address for `python main.py`
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

# Create a single, reusable instance of the settings
settings = Settings()

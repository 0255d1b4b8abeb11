import os
from pydantic_settings import BaseSettings

ENV_PATH = os.path.join(os.path.dirname(__file__), ".env")

class Settings(BaseSettings):
    EXPECTED_SECRET: str = "change-me"

    # GitHub (repo hosting + Pages)
    GITHUB_TOKEN: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TIMEOUT: float = 30.0
    DEFAULT_BRANCH: str = "main"
    PAGES_BUILD_PATH: str = "/"
    LICENSE_HOLDER: str = ""

    # OpenAI-compatible generation endpoint
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Pipeline timing
    REPO_INIT_SETTLE_SECONDS: float = 3.0
    PAGES_SETTLE_SECONDS: float = 30.0
    PIPELINE_DEADLINE_SECONDS: float = 0.0  # 0 disables the deadline

    # Evaluation callback
    NOTIFY_ATTEMPTS: int = 5
    NOTIFY_INITIAL_DELAY: float = 1.0
    NOTIFY_TIMEOUT: float = 10.0

    LOG_PATH: str = "/tmp/deployer.log"

    class Config:
        env_file = ENV_PATH  # <- always read deployer/.env

settings = Settings()

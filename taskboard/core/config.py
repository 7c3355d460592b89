from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "sqlite:///./taskboard.db")
    TASK_API_URL = getenv("TASK_API_URL", "http://localhost:8000")
    TASK_API_TIMEOUT = int(getenv("TASK_API_TIMEOUT", "10"))  # secondes
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

settings = Settings()

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Data file settings
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "library.db")

    # Logging settings
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")
    log_format: str = os.getenv("LOG_FORMAT", "%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Simple Library Management")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")

    # Loan timestamps shown to the user
    timestamp_format: str = os.getenv("TIMESTAMP_FORMAT", "%Y-%m-%d %H:%M:%S")


settings = Settings()

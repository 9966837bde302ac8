from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    db_path: str = os.getenv("SCHOOL_RESULTS_DB_PATH", "data/school_results.db")
    school_name: str = os.getenv("SCHOOL_NAME", "GUZIA HIGH SCHOOL")
    school_address: str = os.getenv("SCHOOL_ADDRESS", "Guzia, Shibganj, Bogura")
    export_dir: str = os.getenv("SCHOOL_RESULTS_EXPORT_DIR", "exports")

    log_level: str = os.getenv("SCHOOL_RESULTS_LOG_LEVEL", "INFO").upper()
    log_file: str = os.getenv("SCHOOL_RESULTS_LOG_FILE", "")

    web_mode: bool = os.getenv("SCHOOL_RESULTS_WEB", "0") == "1"
    port: int = int(os.getenv("PORT", "8550"))


settings = Settings()

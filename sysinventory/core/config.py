# sysinventory/core/config.py
import os

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


class Config:
    """
    Loads runtime settings from environment variables.
    A .env file in the project root (or, failing that, the working directory) is applied first.
    """
    def __init__(self) -> None:
        current_dir = os.path.dirname(os.path.abspath(__file__))
        project_root = os.path.abspath(os.path.join(current_dir, '..', '..'))
        env_path = os.path.join(project_root, '.env')

        if os.path.exists(env_path):
            load_dotenv(dotenv_path=env_path, override=True)
        else:
            load_dotenv(override=True)

    @staticmethod
    def _float(name: str, default: float) -> float:
        try:
            value = float(os.getenv(name, default))
        except ValueError:
            return default
        return value if value >= 0 else default

    @property
    def log_file(self) -> str:
        return os.getenv("SYSINV_LOG_FILE", "sysinventory.log")

    @property
    def log_level(self) -> str:
        return os.getenv("SYSINV_LOG_LEVEL", "INFO").upper()

    @property
    def cpu_sample_interval(self) -> float:
        return self._float("SYSINV_CPU_SAMPLE_INTERVAL", 1.0)

    @property
    def command_timeout(self) -> float:
        return self._float("SYSINV_COMMAND_TIMEOUT", 30.0)

    @property
    def color(self) -> bool:
        if "NO_COLOR" in os.environ:
            return False
        return os.getenv("SYSINV_NO_COLOR", "").strip().lower() not in TRUTHY

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(path: Optional[Path] = None) -> bool:
    """Load .env from the working directory (or `path`) if present.

    Existing environment variables win over values in the file.
    Returns True when a file was loaded.
    """
    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)

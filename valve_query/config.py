"""
Query client configuration
"""
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Query client settings"""

    # Network
    timeout_ms: int = 1000
    packet_size: int = 1400  # Receive buffer ceiling per datagram
    default_port: int = 27015

    # Decoding
    string_encoding: str = "latin-1"  # One byte per character

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    class Config:
        env_prefix = "VALVE_QUERY_"
        env_file = ".env"


settings = Settings()

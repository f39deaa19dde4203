"""Configuration helpers for the FitLockr services."""

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import List, Optional

DEFAULT_CHAT_ROOM = "confirmationRoom"


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return ["*"]
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass
class AppConfig:
    """Configuration values shared by the wardrobe and ticketing services.

    Both services read the same config so they can run side by side from one
    checkout. Only the Cloudinary credentials are secrets; they are expected
    to come from the runtime environment rather than the YAML file.
    """

    wardrobe_db_path: str = "data/wardrobe.db"
    ticketing_db_path: str = "data/ticketing.db"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    image_host: str = "cloudinary"
    log_dir: str = "logs"
    client_log_prefix: str = "fitlockrLog"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    chat_room: str = DEFAULT_CHAT_ROOM
    wardrobe_port: int = 4000
    ticketing_port: int = 4005
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets can be
        injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("FITLOCKR_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            wardrobe_db_path=str(get_value("wardrobe_db_path", "data/wardrobe.db")),
            ticketing_db_path=str(get_value("ticketing_db_path", "data/ticketing.db")),
            cloudinary_cloud_name=get_value("cloudinary_cloud_name"),
            cloudinary_api_key=get_value("cloudinary_api_key"),
            cloudinary_api_secret=get_value("cloudinary_api_secret"),
            image_host=str(get_value("image_host", "cloudinary")).lower(),
            log_dir=str(get_value("log_dir", "logs")),
            client_log_prefix=str(get_value("client_log_prefix", "fitlockrLog")),
            cors_origins=_split_csv(get_value("cors_origins")),
            chat_room=str(get_value("chat_room", DEFAULT_CHAT_ROOM)),
            wardrobe_port=int(get_value("wardrobe_port", "4000") or 4000),
            ticketing_port=int(get_value("port", get_value("ticketing_port", "4005")) or 4005),
            environment=env_name,
        )

    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config

"""Configuration management for Runway.

Reads configuration from ~/.config/runway.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    rules_path: Path
    horizon_months: int = 12
    market_account: str = "market"
    enable_reset: bool = False

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "runway"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="runway.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            rules_path=base_dir / "rules.yaml",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "runway.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Path = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional override for the config file location.

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "runway"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "runway.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    projection_config = data.get("projection", {})
    horizon_months = int(projection_config.get("horizon_months", 12))
    rules_path = Path(projection_config.get("rules_file", base_dir / "rules.yaml"))

    ledger_config = data.get("ledger", {})
    market_account = ledger_config.get("market_account", "market")

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        rules_path=rules_path,
        horizon_months=horizon_months,
        market_account=market_account,
        enable_reset=bool(data.get("enable_reset", False)),
    )


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Destination file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "enable_reset": config.enable_reset,
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "projection": {
            "horizon_months": config.horizon_months,
            "rules_file": str(config.rules_path),
        },
        "ledger": {
            "market_account": config.market_account,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

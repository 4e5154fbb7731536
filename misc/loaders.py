import os
from pathlib import Path
import yaml

from haggler.config import StrategyConfig
from haggler.errors import ConfigurationError
from misc.utils import sanitize

ROOT = Path(__file__).parent.parent


def load_models():
    """Load opponents.yaml and return the list of agents taking part in battles."""
    config_path = ROOT / "opponents.yaml"
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    return config.get("models", [])


def load_strategy(path: str | Path | None = None) -> StrategyConfig:
    """Load haggler strategy parameters.

    The path defaults to $HAGGLER_STRATEGY, then to strategy.yaml in the repo
    root. A missing file means the built-in defaults.
    """
    if path is None:
        path = os.getenv("HAGGLER_STRATEGY") or ROOT / "strategy.yaml"
    path = Path(path)
    if not path.exists():
        return StrategyConfig()

    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping of strategy parameters")
    return StrategyConfig.from_dict(data)


def get_current_code(display_name: str) -> str | None:
    """Get the source of an agent from the solutions folder."""
    solutions_path = ROOT / "solutions" / f"{sanitize(display_name)}.py"
    if solutions_path.exists():
        with open(solutions_path, "r") as f:
            return f.read()
    return None

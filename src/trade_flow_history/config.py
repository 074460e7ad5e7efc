from pathlib import Path

import yaml
from pydantic import BaseModel

from .categories import CATEGORIES, categories_for
from .downsample import MAX_POINTS
from .hit_test import MIN_TOOLTIP_DISTANCE

CONFIG_FILE_NAME = "TradeFlowHistoryConfig.yaml"


class LogConfig(BaseModel):
    dir: str = "logs"
    rotation: str = "1 day"
    retention: str = "30 days"
    level: str = "INFO"


class ViewConfig(BaseModel):
    # every category is shown until the player unchecks it
    import_goods: bool = True
    import_forestry: bool = True
    import_farming: bool = True
    import_ore: bool = True
    import_oil: bool = True
    import_mail: bool = True

    export_goods: bool = True
    export_forestry: bool = True
    export_farming: bool = True
    export_ore: bool = True
    export_oil: bool = True
    export_mail: bool = True
    export_fish: bool = True

    max_points: int = MAX_POINTS
    tooltip_distance: float = MIN_TOOLTIP_DISTANCE
    curve_width: float = 0.5

    def is_enabled(self, category):
        return getattr(self, category.name)

    def enabled_flags(self):
        """One boolean per category in channel order."""
        return [self.is_enabled(c) for c in CATEGORIES]

    def enabled(self, direction):
        """``(index, category)`` pairs of the enabled categories of a direction."""
        return [(i, c) for i, c in categories_for(direction) if self.is_enabled(c)]


class AppConfig(BaseModel):
    view: ViewConfig = ViewConfig()
    log: LogConfig = LogConfig()


def load_config(path=CONFIG_FILE_NAME):
    """Read the YAML configuration file.

    A missing or empty file yields the defaults.

    Raises:
        pydantic.ValidationError: If the file holds invalid settings.
    """
    path = Path(path)
    if not path.exists():
        return AppConfig()
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return AppConfig(**data)


def save_config(config, path=CONFIG_FILE_NAME):
    Path(path).write_text(yaml.safe_dump(config.model_dump(), sort_keys=False), encoding="utf-8")

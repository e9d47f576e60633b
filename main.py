"""Entry point: load the custom systems content and print a sector summary."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from galaxy.assets.content import SYSTEMS_DIR, ContentManager
from galaxy.engine.logger import GameLogger, LoggerConfig


SETTINGS_PATH = Path("settings.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "contentRoot": "data",
    "customSystemsDir": SYSTEMS_DIR,
}


def load_settings() -> Dict[str, Any]:
    if not SETTINGS_PATH.exists():
        return dict(DEFAULT_SETTINGS)
    try:
        data = json.loads(SETTINGS_PATH.read_text())
    except json.JSONDecodeError:
        return dict(DEFAULT_SETTINGS)
    settings = dict(DEFAULT_SETTINGS)
    settings.update(data)
    return settings


def main() -> None:
    settings = load_settings()
    logger = GameLogger(LoggerConfig.from_dict(settings))

    content = ContentManager(
        Path(settings["contentRoot"]),
        logger=logger,
        systems_dir=settings["customSystemsDir"],
    )
    content.load()

    for path, systems in sorted(content.custom_systems.sectors().items()):
        for system in systems:
            faction = system.faction.name if system.faction else "-"
            bodies = sum(1 for _ in system.bodies())
            print(
                f"{path} #{system.system_index} {system.name}: {system.num_stars} star(s), "
                f"{bodies} bodies, faction {faction}"
            )

    for channel, (warnings, errors) in sorted(logger.problem_counts().items()):
        print(f"{channel}: {warnings} warning(s), {errors} error(s)")


if __name__ == "__main__":
    main()

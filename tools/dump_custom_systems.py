"""Convert every loaded custom system into a JSON system document."""
import argparse
import json
import re
from pathlib import Path

from galaxy.assets.content import ContentManager
from galaxy.engine.logger import init_logger
from galaxy.loaders.document import dump_system_to_json

ROOT = Path(__file__).resolve().parents[1]
CONTENT = ROOT / "data"
OUTPUT = ROOT / "build" / "custom_systems"


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") or "system"


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--content", type=Path, default=CONTENT)
    parser.add_argument("--output", type=Path, default=OUTPUT)
    args = parser.parse_args()

    content = ContentManager(args.content, logger=init_logger(ROOT / "settings.json"))
    content.load()

    args.output.mkdir(parents=True, exist_ok=True)
    for system in content.custom_systems:
        x, y, z = system.sector
        target = args.output / f"{x}_{y}_{z}_{system.system_index}_{_slug(system.name)}.json"
        target.write_text(json.dumps(dump_system_to_json(system), indent=2))
        print(f"Wrote {target}")


if __name__ == "__main__":
    main()

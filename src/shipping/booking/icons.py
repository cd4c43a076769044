"""Display icons handed back when a cargo is unbooked.

Icons are loaded once by the composition root and selection goes through an
explicitly seeded random generator, so the booking service itself holds no
hidden global state.
"""

import random
from collections.abc import Callable
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

IconPicker = Callable[[], bytes | None]


def load_icons(directory: str | Path) -> list[bytes]:
    """Read every ``.jpg`` file in ``directory``, in file-name order.

    A missing or unreadable directory yields no icons.
    """
    path = Path(directory)
    if not path.is_dir():
        logger.warning("Icon directory not found", directory=str(path))
        return []

    icons = []
    for icon_file in sorted(path.glob("*.jpg")):
        try:
            icons.append(icon_file.read_bytes())
        except OSError as exc:
            logger.warning("Unable to read icon file", file=icon_file.name, error=str(exc))
    return icons


def make_icon_picker(icons: list[bytes], rng: random.Random | None = None) -> IconPicker:
    """Return a callable choosing one of ``icons`` at random, or None if there are none."""
    rng = rng or random.Random()
    choices = list(icons)

    def pick_icon() -> bytes | None:
        if not choices:
            return None
        return choices[rng.randrange(len(choices))]

    return pick_icon

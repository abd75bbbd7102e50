from __future__ import annotations
import logging, sys


def setup_logging(level_name: str = "INFO") -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    root.addHandler(sh)

    logging.captureWarnings(True)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    for name in ("services", "agent", "app", "uvicorn.error"):
        logging.getLogger(name).setLevel(level)

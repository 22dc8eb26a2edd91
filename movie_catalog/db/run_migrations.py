"""
Programmatic Alembic migration runner.

Allows running migrations without an alembic.ini by configuring the script location
to this package's migrations directory.

Usage examples:
    python -m movie_catalog.db.run_migrations upgrade head
    python -m movie_catalog.db.run_migrations downgrade -1
    python -m movie_catalog.db.run_migrations history
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from alembic import command
from alembic.config import Config

from movie_catalog.db.config import Settings, load_settings


def build_config(settings: Settings) -> Config:
    """Return an Alembic Config pointing at the bundled migrations."""
    cfg = Config()
    # Script location is the migrations folder next to this file.
    here = Path(__file__).resolve()
    script_location = here.parent / "migrations"
    cfg.set_main_option("script_location", str(script_location))

    # Set DB URL for offline usage; env.py uses the async URL when online.
    # '%' must be escaped for ConfigParser interpolation.
    cfg.set_main_option("sqlalchemy.url", settings.sync_database_url.replace("%", "%%"))
    cfg.attributes["settings"] = settings
    return cfg


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> None:
    """Run Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cfg = build_config(settings if settings is not None else load_settings())

    # Dispatch to Alembic CLI command
    cmd = args[0]
    other = args[1:]

    if cmd == "upgrade":
        command.upgrade(cfg, *(other or ["head"]))
    elif cmd == "downgrade":
        command.downgrade(cfg, *(other or ["-1"]))
    elif cmd == "history":
        command.history(cfg, *other)
    elif cmd == "current":
        command.current(cfg, *other)
    elif cmd == "revision":
        command.revision(cfg, *other)
    elif cmd == "heads":
        command.heads(cfg, *other)
    elif cmd == "show":
        if not other:
            print("Usage: show <revision>")
            sys.exit(2)
        command.show(cfg, other[0])
    else:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)


if __name__ == "__main__":
    main()

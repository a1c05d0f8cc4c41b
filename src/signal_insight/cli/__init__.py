"""CLI entry point, registers all subcommands."""

import typer

app = typer.Typer(
    name="signal-insight",
    help="Signal Insight - static analysis of signal declarations, emissions and connections",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .unused import unused as _unused  # noqa: F401, E402
from .clusters import clusters as _clusters  # noqa: F401, E402
from .refactor import refactor as _refactor  # noqa: F401, E402
from .cache import cache_info as _cache_info  # noqa: F401, E402

# evapurge/cli.py
from pathlib import Path
from typing import List, Optional

import typer

from evapurge import env
from evapurge.config import CLI_DEFAULT_CONTENT, find_config_file, load_purge_config
from evapurge.config.models import PurgeConfig, flatten_safelist
from evapurge.errors import CSSNotFoundError, PurgeError
from evapurge.logger import get_current_log_file, get_logger
from evapurge.purger import CSSPurger
from evapurge.ui import (
    print_error,
    print_highlight,
    print_info,
    print_primary,
    print_stats_table,
)
from evapurge.ui.spinner import safe_status

logger = get_logger(__name__)

app = typer.Typer(
    help="EVA CSS Purge: drop unused rules from a compiled EVA stylesheet",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


def _resolve_config(
    content: Optional[List[str]],
    css: Optional[str],
    output: Optional[str],
    config: Optional[Path],
    safelist: Optional[str],
) -> PurgeConfig:
    """``--config`` (or a discovered config file) first, explicit flags on top."""
    if config is None and css is None:
        config = find_config_file()
        if config is not None:
            print_info(f"📋 Using config file: {config}")

    overrides = dict(
        content=content or None,
        css=css,
        output=output,
        safelist=flatten_safelist(safelist) if safelist else None,
    )
    if config is not None:
        cfg = load_purge_config(config, **overrides)
    else:
        cfg = PurgeConfig(content=[]).merged(**overrides)

    if not cfg.content:
        cfg = cfg.merged(content=list(CLI_DEFAULT_CONTENT))
    return cfg


def _echo_config(cfg: PurgeConfig) -> None:
    print_primary("🎯 EVA CSS Purge")
    print_info(f"📁 CSS input: {cfg.css}")
    print_info(f"📁 CSS output: {cfg.resolved_output()}")
    print_info(f"🔍 Content patterns: {', '.join(cfg.content)}")
    if cfg.safelist:
        print_info(f"🛡️  Safelist: {', '.join(cfg.safelist)}")


@app.command()
def purge(
    ctx: typer.Context,
    content: Optional[List[str]] = typer.Option(
        None,
        "--content",
        help="Content files to scan (glob pattern, repeatable)",
        show_default=False,
    ),
    css: Optional[str] = typer.Option(None, "--css", help="Input CSS file"),
    output: Optional[str] = typer.Option(
        None, "--output", help="Output CSS file (default: <css>-purged.css)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Config file (eva.config.yml / .json / package.json)"
    ),
    safelist: Optional[str] = typer.Option(
        None, "--safelist", help="Comma-separated class prefixes or /regex/ to always keep"
    ),
):
    """
    Scan content files for used classes, IDs and CSS variables, keep only the
    matching rules of the stylesheet and write a compressed copy.
    """
    if not any((content, css, output, config, safelist)):
        typer.echo(ctx.get_help())
        raise typer.Exit()

    # relative paths and content patterns resolve against the invocation dir
    env.set_project_root(Path.cwd())

    try:
        cfg = _resolve_config(content, css, output, config, safelist)
    except PurgeError as e:
        print_error(f"❌ {e}")
        logger.error(f"Config resolution failed: {e}")
        raise typer.Exit(code=1)

    if not cfg.css:
        print_error("❌ Error: --css option is required")
        print_info("Run eva-purge --help for usage information")
        raise typer.Exit(code=1)

    _echo_config(cfg)

    purger = CSSPurger(cfg)
    try:
        with safe_status("Purging unused CSS…"):
            stats = purger.purge()
    except CSSNotFoundError as e:
        print_error(f"❌ {e}")
        raise typer.Exit(code=1)
    except PurgeError as e:
        print_error(f"❌ CSS purge failed: {e}")
        logger.exception("Purge failed")
        raise typer.Exit(code=1)
    except Exception as e:
        print_error(f"❌ CSS purge failed: {e}")
        logger.exception("Unexpected error during purge")
        raise typer.Exit(code=1)

    print_stats_table("📈 Purge Statistics", stats.rows())
    print_highlight(f"📁 Output: {purger.output_path}")
    logger.debug(f"Log file: {get_current_log_file()}")

from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from tsdoc.errors import FileAccessError, InvalidArgumentError
from tsdoc.extractor import coerce_variant, extract_module, render_json
from tsdoc.logger import logger, setup_logging
from tsdoc.settings import ExtractorSettings, load_settings


def _fail(message: str, ctx: Optional[click.Context] = None) -> None:
    click.echo(f"Error: {message}", err=True)
    if ctx is not None:
        click.echo(ctx.get_usage(), err=True)
    raise SystemExit(1)


def _load_settings(variant: Optional[str], debug: bool) -> ExtractorSettings:
    overrides = {}
    if variant is not None:
        overrides["variant"] = coerce_variant(variant)
    if debug:
        overrides["debug"] = True
    return load_settings(**overrides)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("file", required=False, type=click.Path(path_type=Path))
@click.option(
    "--variant",
    type=str,
    default=None,
    help="Visibility variant: 'public' (default) or 'internal'.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging and print a traceback on failure (or set TSDOC_DEBUG=1).",
)
@click.pass_context
def main(
    ctx: click.Context,
    file: Optional[Path],
    variant: Optional[str],
    debug: bool,
) -> None:
    """
    Extract the exported API surface of a TypeScript/JavaScript FILE and print
    it as JSON.
    """
    if file is None:
        _fail("file-path argument required", ctx)

    try:
        settings = _load_settings(variant, debug)
    except InvalidArgumentError as ex:
        _fail(str(ex), ctx)
    except ValidationError as ex:
        _fail(f"invalid configuration: {ex}", ctx)

    setup_logging(settings.debug)

    path = file.resolve()
    try:
        result = extract_module(path, settings.variant, settings)
    except FileAccessError as ex:
        if settings.debug:
            logger.exception("Extraction failed", path=str(path))
        _fail(str(ex))
    except Exception as ex:
        if settings.debug:
            logger.exception("Extraction failed", path=str(path))
        _fail(f"extraction failed: {ex}")

    click.echo(render_json(result))


if __name__ == "__main__":
    main()

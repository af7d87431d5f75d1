"""Command that prints the host extension bundle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from edisontel.bundle import build_bundle
from edisontel.cli._options import global_options

if TYPE_CHECKING:
    from edisontel.cli.main import AppContext


@click.command("bundle")
@global_options
def bundle_cmd(app_ctx: AppContext) -> None:
    """Print the extension bundle the host registers for this source."""
    app_ctx.formatter.bundle(build_bundle(app_ctx.settings))

import logging
from typing import Annotated

import typer

from codegen_templates.cli.templates import check, markers, preview, ranges, tree
from codegen_templates.config import get_settings

app = typer.Typer(
    name="codegen-templates",
    help="Codegen Templates CLI: validate and inspect annotated template files.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log loader activity.")] = False,
) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


app.command("check")(check)
app.command("ranges")(ranges)
app.command("markers")(markers)
app.command("tree")(tree)
app.command("preview")(preview)


def main() -> None:
    app()

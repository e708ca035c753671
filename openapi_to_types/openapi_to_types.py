import json

import click

from .cli_utils import reconstruct_command_line
from .errors import SchemaError
from .log import configure_logging
from .pipeline import GeneratorConfig, PipelineGenerator, render_json, render_summary


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--format", "-f", "output_format", default="json", type=click.Choice(["json", "summary"]))
@click.option(
    "--fail-fast",
    is_flag=True,
    default=False,
    help="Stop at the first schema that cannot be generated instead of skipping it",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
@click.pass_context
def openapi_to_types(ctx, config, output_format, fail_fast, verbose, path, output):
    """Generate the type model of the schemas in the OpenAPI document PATH."""
    configure_logging(verbose=verbose)

    with open(path) as f:
        document = json.load(f)

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # CLI flag overrides the config file
    if fail_fast:
        config.fail_fast = True

    try:
        model = PipelineGenerator(document, config).generate()
    except SchemaError as error:
        raise click.ClickException(error.message) from error

    if output_format == "summary":
        out = render_summary(model, command_line=reconstruct_command_line(openapi_to_types))
    else:
        out = render_json(model)

    if output is None:
        click.echo(out, nl=False)
    else:
        with open(output, "w") as f:
            f.write(out)

    if not model.ok:
        ctx.exit(1)

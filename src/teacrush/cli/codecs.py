"""CLI codecs command for teacrush."""

import json

import click

from teacrush.domain.enums import HardwareBackend
from teacrush.encode.presets import CODEC_CATALOG, codecs_for


@click.command("codecs")
@click.option(
    "--hw",
    "backend",
    type=click.Choice([b.value for b in HardwareBackend], case_sensitive=False),
    default=None,
    help="Only list codecs for this backend.",
)
@click.option("--avif", is_flag=True, help="Only list codecs usable for AVIF.")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
def codecs_command(backend: str | None, avif: bool, output_format: str) -> None:
    """List the encoders offered per backend."""
    if backend is not None:
        backends = [HardwareBackend(backend.lower())]
    else:
        backends = list(CODEC_CATALOG)

    if output_format == "json":
        data = {
            b.value: [
                {"name": c.name, "encoder": c.encoder, "extension": c.extension}
                for c in codecs_for(b, avif_only=avif)
            ]
            for b in backends
        }
        click.echo(json.dumps(data, indent=2))
        return

    for b in backends:
        click.echo(f"{b.label}:")
        for codec in codecs_for(b, avif_only=avif):
            click.echo(f"  {codec.encoder:<12} {codec.extension:<6} {codec.name}")

"""
Command line interface: render a letter to disk or serve the HTTP API
"""

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from .assets import StaticLogo, logo_provider_for
from .config import load_settings
from .pdf import LetterPDFBuilder
from .request import LetterRequest


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def main(verbose):
    """Generate letters for DL/C6 window envelopes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option('--adresse', 'address', default='', help='Street and house number')
@click.option('--plz-ort', 'locality', default='', help='Postal code and city')
@click.option('--text-file', type=click.Path(exists=True, dir_okay=False), help='Letter body to use instead of the default text')
@click.option('--betreff', 'subject', help='Subject line')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False), help='JSON settings file')
@click.option('--logo', 'logo_path', type=click.Path(exists=True, dir_okay=False), help='Local logo image')
@click.option('--output', '-o', help='Output PDF path')
def render(address, locality, text_file, subject, config_path, logo_path, output):
    """Render one letter to a PDF file."""
    try:
        settings = load_settings(config_path)
    except json.JSONDecodeError as e:
        click.echo(f"✗ Error: Invalid JSON: {e}", err=True)
        sys.exit(1)
    except ValidationError as e:
        click.echo(f"✗ Error: Validation failed: {e}", err=True)
        sys.exit(1)

    body_text = Path(text_file).read_text(encoding='utf-8') if text_file else None
    if body_text is not None and not body_text.strip():
        body_text = None
    request = LetterRequest(address=address, locality=locality, body_text=body_text, subject=subject)

    if logo_path:
        provider = StaticLogo(Path(logo_path).read_bytes())
    else:
        provider = logo_provider_for(settings.logo)

    try:
        builder = LetterPDFBuilder(settings, logo=provider.fetch())
        pdf_data = builder.generate(request)
    except Exception as e:
        click.echo(f"✗ Error generating PDF: {e}", err=True)
        sys.exit(1)

    output = Path(output or settings.file_name)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pdf_data)

    fit = builder.fit
    click.echo(f"✓ Letter generated: {output} ({fit.chosen_font_size:g} pt)")
    if not fit.fits:
        click.echo("! Text does not fit on one page and was cut at the bottom margin", err=True)


@main.command()
@click.option('--host', default='127.0.0.1', show_default=True)
@click.option('--port', default=8000, type=int, show_default=True)
def serve(host, port):
    """Serve the letter API with uvicorn."""
    import uvicorn
    uvicorn.run("fensterbrief.api:app", host=host, port=port)


if __name__ == "__main__":
    main()

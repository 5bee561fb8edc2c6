"""
CLI tests using click's runner
"""

from pypdf import PdfReader
from click.testing import CliRunner

from fensterbrief.cli import main


def test_render_writes_pdf(tmp_path, monkeypatch):
    monkeypatch.delenv("FENSTERBRIEF_LOGO_URL", raising=False)
    monkeypatch.delenv("FENSTERBRIEF_CONFIG", raising=False)
    body = tmp_path / "brief.txt"
    body.write_text("Drei kurze Sätze. Mehr nicht. Danke.", encoding="utf-8")
    output = tmp_path / "out" / "brief.pdf"

    result = CliRunner().invoke(main, [
        "render", "--adresse", "Hauptplatz 1", "--plz-ort", "1010 Wien",
        "--text-file", str(body), "--output", str(output),
    ])

    assert result.exit_code == 0, result.output
    assert "✓ Letter generated" in result.output
    fields = PdfReader(str(output)).get_form_text_fields()
    assert fields["anschrift"].endswith("Hauptplatz 1\n1010 Wien")


def test_render_reports_invalid_config(tmp_path):
    config = tmp_path / "bad.json"
    config.write_text('{"layout": {"candidate_font_sizes": []}}', encoding="utf-8")
    result = CliRunner().invoke(main, ["render", "--config", str(config), "--output", str(tmp_path / "x.pdf")])
    assert result.exit_code == 1
    assert "Validation failed" in result.output


def test_blank_text_file_uses_default_body(tmp_path, monkeypatch):
    monkeypatch.delenv("FENSTERBRIEF_LOGO_URL", raising=False)
    monkeypatch.delenv("FENSTERBRIEF_CONFIG", raising=False)
    body = tmp_path / "leer.txt"
    body.write_text("  \n\n \t\n", encoding="utf-8")
    output = tmp_path / "brief.pdf"

    result = CliRunner().invoke(main, ["render", "--text-file", str(body), "--output", str(output)])

    assert result.exit_code == 0, result.output
    text = PdfReader(str(output)).pages[0].extract_text()
    assert "Eldi Neziri" in text

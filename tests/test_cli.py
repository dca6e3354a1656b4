"""Tests for the CLI module."""

import json
from unittest.mock import MagicMock, patch

import pytest

from ia2amp.cli import main
from ia2amp.exceptions import InvalidArgumentError
from ia2amp.transformers import ConversionResult
from schemas.warning import ConversionWarning


@pytest.fixture
def article_file(tmp_path, sample_article):
    path = tmp_path / "article.json"
    path.write_text(json.dumps(sample_article))
    return path


@pytest.fixture
def mock_transformer():
    """Patch the transformer so no media is resolved."""
    with patch("ia2amp.cli.AMPTransformer") as mock_class:
        transformer = MagicMock()
        transformer.transform.return_value = ConversionResult(
            html="<!doctype html><html amp></html>", css="p {}"
        )
        mock_class.return_value = transformer
        yield mock_class


class TestCLIConvert:
    """Tests for the convert command."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "convert" in capsys.readouterr().out

    def test_missing_article_file(self, tmp_path, caplog):
        result = main(["convert", "--article", str(tmp_path / "missing.json")])

        assert result == 1
        assert "Article file not found" in caplog.text

    def test_invalid_article_json(self, tmp_path, caplog):
        path = tmp_path / "article.json"
        path.write_text("{not json")

        assert main(["convert", "--article", str(path)]) == 1
        assert "Failed to load conversion input" in caplog.text

    def test_writes_output_files(self, tmp_path, article_file, mock_transformer):
        output = tmp_path / "out" / "article.html"
        css_output = tmp_path / "out" / "article.css"

        result = main([
            "convert",
            "--article", str(article_file),
            "--output", str(output),
            "--css-output", str(css_output),
        ])

        assert result == 0
        assert output.read_text() == "<!doctype html><html amp></html>"
        assert css_output.read_text() == "p {}"

    def test_writes_to_stdout(self, article_file, mock_transformer, capsys):
        assert main(["convert", "--article", str(article_file)]) == 0
        assert capsys.readouterr().out.startswith("<!doctype html>")

    def test_options_become_properties(self, tmp_path, article_file, mock_transformer):
        """CLI options override the properties file."""
        properties_file = tmp_path / "properties.json"
        properties_file.write_text(json.dumps({"css-selector-prefix": "file-", "publisher": "Example"}))
        style_file = tmp_path / "style.json"
        style_file.write_text('{"title": {"color": "#000000"}}')

        main([
            "convert",
            "--article", str(article_file),
            "--properties", str(properties_file),
            "--style-file", str(style_file),
            "--lang", "en-US",
            "--maps-api-key", "KEY",
            "--download-media-sizes",
        ])

        properties = mock_transformer.call_args.args[0]
        assert properties.lang == "en-US"
        assert properties.publisher == "Example"
        assert properties.css_prefix == "file-"
        assert properties.google_maps_api_key == "KEY"
        assert properties.enable_download_for_media_sizing is True
        assert properties.override_styles == {"title": {"color": "#000000"}}

    def test_options_beat_dashed_file_keys(self, tmp_path, article_file, mock_transformer):
        """Options win even when the file uses the dashed option names."""
        properties_file = tmp_path / "properties.json"
        properties_file.write_text(
            json.dumps(
                {
                    "css-selector-prefix": "file-",
                    "google-maps-api-key": "FILE-KEY",
                    "media-cache-folder": str(tmp_path / "file-cache"),
                    "override-styles": {"title": {"color": "#FFFFFF"}},
                }
            )
        )
        style_file = tmp_path / "style.json"
        style_file.write_text('{"title": {"color": "#000000"}}')

        main([
            "convert",
            "--article", str(article_file),
            "--properties", str(properties_file),
            "--style-file", str(style_file),
            "--prefix", "cli-",
            "--maps-api-key", "CLI-KEY",
            "--media-cache", str(tmp_path / "cli-cache"),
            "--download-media-sizes",
        ])

        properties = mock_transformer.call_args.args[0]
        assert properties.css_prefix == "cli-"
        assert properties.google_maps_api_key == "CLI-KEY"
        assert properties.media_cache_folder == tmp_path / "cli-cache"
        assert properties.enable_download_for_media_sizing is True
        assert properties.override_styles == {"title": {"color": "#000000"}}

    def test_warnings_are_logged(self, article_file, mock_transformer, caplog):
        mock_transformer.return_value.transform.return_value = ConversionResult(
            html="<!doctype html>", warnings=[ConversionWarning("Map will be empty")]
        )

        assert main(["convert", "--article", str(article_file)]) == 0
        assert "1 warning(s)" in caplog.text
        assert "Map will be empty" in caplog.text

    def test_conversion_error_exits_with_1(self, article_file, mock_transformer, caplog):
        mock_transformer.return_value.transform.side_effect = InvalidArgumentError("Bad tree")

        assert main(["convert", "--article", str(article_file)]) == 1
        assert "Bad tree" in caplog.text

    def test_end_to_end(self, tmp_path, article_file):
        """A real conversion with sizes given in the properties file."""
        properties_file = tmp_path / "properties.json"
        properties_file.write_text(
            json.dumps(
                {
                    "media-sizes": {
                        "http://example.com/cover.jpg": [800, 454],
                        "http://example.com/photo.jpg": [640, 480],
                    }
                }
            )
        )
        output = tmp_path / "article.html"

        result = main([
            "convert",
            "--article", str(article_file),
            "--properties", str(properties_file),
            "--output", str(output),
        ])

        assert result == 0
        html = output.read_text(encoding="utf-8")
        assert html.startswith("<!doctype html><html amp")
        assert "Very First WOD!" in html

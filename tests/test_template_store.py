"""Tests for template loading."""

import json

import pytest

from reality_setup.common.exceptions import TemplateMalformedError, TemplateNotFoundError
from reality_setup.templates.document import (
    ClientConfig,
    ConfigDocument,
    DocumentKind,
    ServerConfig,
)
from reality_setup.templates.store import TemplateStore


class TestTemplateStoreLoad:
    """Test loading templates from files."""

    def test_load(self, tmp_path, template_store):
        """Test loading a JSON object."""
        path = tmp_path / "template.json"
        path.write_text('{"b": 1, "a": {"c": [1, 2]}}', encoding="utf-8")

        document = template_store.load(path)

        assert isinstance(document, ConfigDocument)
        assert document.kind == DocumentKind.GENERIC
        assert document.data == {"b": 1, "a": {"c": [1, 2]}}
        assert list(document.data) == ["b", "a"]
        assert document.source == str(path)

    def test_missing_file(self, tmp_path, template_store):
        """Test that an absent template raises TemplateNotFoundError."""
        with pytest.raises(TemplateNotFoundError, match="missing.json"):
            template_store.load(tmp_path / "missing.json")

    def test_directory_is_not_a_template(self, tmp_path, template_store):
        """Test that a directory path is treated as not found."""
        with pytest.raises(TemplateNotFoundError):
            template_store.load(tmp_path)

    @pytest.mark.parametrize("content", ["{not json", "", "[1, 2]", '"text"', "null"])
    def test_malformed(self, tmp_path, template_store, content):
        """Test that non-object content raises TemplateMalformedError."""
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(TemplateMalformedError):
            template_store.load(path)

    def test_not_utf8(self, tmp_path, template_store):
        """Test that undecodable bytes raise TemplateMalformedError."""
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe{\x00")
        with pytest.raises(TemplateMalformedError, match="not UTF-8"):
            template_store.load(path)

    def test_cache(self, tmp_path, template_store):
        """Test that repeated loads return the cached document."""
        path = tmp_path / "template.json"
        path.write_text('{"a": 1}', encoding="utf-8")

        first = template_store.load(path)
        path.write_text('{"a": 2}', encoding="utf-8")

        assert template_store.load(path) is first
        template_store.clear()
        assert template_store.load(path).data == {"a": 2}

    def test_typed_loads(self, tmp_path, template_store):
        """Test that server and client loads produce typed documents."""
        path = tmp_path / "template.json"
        path.write_text(json.dumps({"inbounds": []}), encoding="utf-8")

        assert isinstance(template_store.load_server(path), ServerConfig)
        assert isinstance(template_store.load_client(path), ClientConfig)


class TestBundledTemplates:
    """Test the templates shipped with the package."""

    def test_server_template(self, server_template):
        """Test the bundled server template shape."""
        assert server_template.kind == DocumentKind.SERVER
        tags = [inbound["tag"] for inbound in server_template.data["inbounds"]]
        assert "vless-in" in tags

    def test_client_template(self, client_template):
        """Test the bundled client template shape."""
        assert client_template.kind == DocumentKind.CLIENT
        inbound_tags = [inbound["tag"] for inbound in client_template.data["inbounds"]]
        outbound_tags = [outbound["tag"] for outbound in client_template.data["outbounds"]]
        assert inbound_tags == ["socks-in", "http-in"]
        assert "proxy" in outbound_tags

    def test_bundled_templates_are_cached(self, template_store):
        """Test that the bundled template is parsed once per store."""
        assert template_store.load_server() is template_store.load_server()


class TestConfigDocument:
    """Test ConfigDocument serialization."""

    def test_to_json_is_stable(self):
        """Test pretty-printed output with trailing newline."""
        document = ConfigDocument(data={"z": 1, "a": ["é"]})
        assert document.to_json() == '{\n  "z": 1,\n  "a": [\n    "é"\n  ]\n}\n'

    def test_clone_data_is_deep(self):
        """Test that clones do not share nested containers."""
        document = ConfigDocument(data={"a": {"b": [1]}})
        clone = document.clone_data()
        clone["a"]["b"].append(2)
        assert document.data == {"a": {"b": [1]}}

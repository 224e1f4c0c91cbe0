"""Tests for the npmrc document model."""

import pytest
from nodejs_provisioning import ConfigDocument, Property, Comment

NPMRC = """\
; npm user config
always-auth = true
prefix = "/var/lib/tools/nodejs/Node_6.x"
browser
email=dev@example.com

@acme:registry = https://npm.acme.com/
; trailing comment
"""


@pytest.fixture
def npmrc_file(tmp_path):
    path = tmp_path / ".npmrc"
    path.write_text(NPMRC, encoding="utf-8")
    return path


class TestParsing:
    """Test loading npmrc content."""

    def test_load(self, npmrc_file):
        """Test values are read from a file."""
        doc = ConfigDocument.load(npmrc_file)
        assert doc.contains("always-auth")
        assert doc.get("always-auth") == "true"
        assert doc.get("prefix") == '"/var/lib/tools/nodejs/Node_6.x"'
        assert doc.get("@acme:registry") == "https://npm.acme.com/"

    def test_key_value_trimmed(self):
        """Test keys and values are trimmed around '='."""
        doc = ConfigDocument.loads("  email=dev@example.com  \n")
        assert doc.get("email") == "dev@example.com"

    def test_malformed_line_becomes_comment(self, npmrc_file):
        """Test a line without '=' is kept as a comment, not a key."""
        doc = ConfigDocument.load(npmrc_file)
        assert not doc.contains("browser")
        assert "browser" in doc.comments()

    def test_comments_and_blank_lines(self):
        """Test comments keep their text and blank lines are dropped."""
        doc = ConfigDocument.loads(";first\n\n   \n; second\n")
        assert doc.comments() == ["first", " second"]
        assert len(doc) == 2

    def test_value_may_contain_equals(self):
        """Test only the first '=' separates key and value."""
        doc = ConfigDocument.loads("//npm.acme.com/:_auth = Ym90OnMzY3IzdA==\n")
        assert doc.get("//npm.acme.com/:_auth") == "Ym90OnMzY3IzdA=="

    def test_none_content(self):
        """Test None parses to an empty document."""
        assert len(ConfigDocument.loads(None)) == 0

    def test_windows_line_endings(self):
        """Test CRLF content parses like LF content."""
        doc = ConfigDocument.loads("a = 1\r\nb = 2\r\n")
        assert doc.items() == [("a", "1"), ("b", "2")]

    def test_load_missing_file(self, tmp_path):
        """Test loading a missing file fails."""
        with pytest.raises(FileNotFoundError):
            ConfigDocument.load(tmp_path / "missing")

    def test_load_directory(self, tmp_path):
        """Test loading a directory fails."""
        with pytest.raises(IsADirectoryError):
            ConfigDocument.load(tmp_path)


class TestMutation:
    """Test get/set/comment semantics."""

    def test_set_new_key_appends(self):
        """Test a new key goes at the end."""
        doc = ConfigDocument.loads("a = 1\nb = 2\n")
        assert doc.set("c", "3") is None
        assert doc.keys() == ["a", "b", "c"]

    def test_set_existing_key_keeps_position(self):
        """Test overwriting a key keeps its original position."""
        doc = ConfigDocument.loads("a = 1\nb = 2\nc = 3\n")
        assert doc.set("a", "10") == "1"
        assert doc.items() == [("a", "10"), ("b", "2"), ("c", "3")]
        assert doc.dumps() == "a = 10\nb = 2\nc = 3\n"

    def test_set_bool(self):
        """Test booleans are stored as npm literals."""
        doc = ConfigDocument()
        doc.set("always-auth", True)
        doc.set("strict-ssl", False)
        assert doc.get("always-auth") == "true"
        assert doc.get("strict-ssl") == "false"
        assert doc.get_as_bool("always-auth") is True
        assert doc.get_as_bool("strict-ssl") is False
        assert doc.get_as_bool("missing") is None

    def test_get_as_int(self):
        """Test numeric access."""
        doc = ConfigDocument.loads("fetch-retries = 5\nname = x\n")
        assert doc.get_as_int("fetch-retries") == 5
        assert doc.get_as_int("missing") is None
        with pytest.raises(ValueError):
            doc.get_as_int("name")

    def test_get_default(self):
        """Test missing keys return the default."""
        doc = ConfigDocument()
        assert doc.get("registry") is None
        assert doc.get("registry", "https://registry.npmjs.org/") == "https://registry.npmjs.org/"

    def test_none_key_rejected(self):
        """Test None keys are a programming error."""
        doc = ConfigDocument()
        with pytest.raises(TypeError):
            doc.set(None, "x")
        with pytest.raises(TypeError):
            doc.get(None)

    def test_duplicate_comments_kept(self):
        """Test the same comment twice yields two lines."""
        doc = ConfigDocument()
        doc.add_comment("same")
        doc.add_comment("same")
        assert doc.dumps() == ";same\n;same\n"

    def test_comment_text_never_collides_with_key(self):
        """Test a comment and a key with identical text coexist."""
        doc = ConfigDocument()
        doc.add_comment("registry")
        doc.set("registry", "https://registry.npmjs.org/")
        assert doc.comments() == ["registry"]
        assert doc.get("registry") == "https://registry.npmjs.org/"
        assert doc.dumps() == ";registry\nregistry = https://registry.npmjs.org/\n"

    def test_comment_appended_last(self, npmrc_file):
        """Test a new comment is the last line of the saved file."""
        doc = ConfigDocument.load(npmrc_file)
        doc.add_comment("test comment")
        doc.save(npmrc_file)
        lines = npmrc_file.read_text(encoding="utf-8").splitlines()
        assert lines[-1] == ";test comment"

    def test_remove(self):
        """Test removing a key keeps the other positions consistent."""
        doc = ConfigDocument.loads("a = 1\n;c\nb = 2\nd = 4\n")
        assert doc.remove("b") == "2"
        assert doc.remove("b") is None
        doc.set("d", "40")
        assert doc.dumps() == "a = 1\n;c\nd = 40\n"


class TestSerialization:
    """Test rendering and round trips."""

    def test_dumps_format(self):
        """Test entries render in insertion order, newline terminated."""
        doc = ConfigDocument()
        doc.add_comment(" header")
        doc.set("registry", "https://registry.npmjs.org/")
        doc.set("@acme:registry", "https://npm.acme.com/")
        assert doc.dumps() == (
            "; header\n"
            "registry = https://registry.npmjs.org/\n"
            "@acme:registry = https://npm.acme.com/\n"
        )
        assert str(doc) == doc.dumps()

    def test_empty_document(self):
        """Test an empty document renders as empty text."""
        assert ConfigDocument().dumps() == ""

    def test_round_trip(self, npmrc_file):
        """Test load(dumps(doc)) preserves keys, values and comments in order."""
        doc = ConfigDocument.load(npmrc_file)
        reloaded = ConfigDocument.loads(doc.dumps())
        assert reloaded == doc
        assert reloaded.items() == doc.items()
        assert reloaded.comments() == doc.comments()

    def test_save_and_reload(self, npmrc_file):
        """Test a saved key can be read back."""
        doc = ConfigDocument.load(npmrc_file)
        doc.set("test", "value")
        doc.save(npmrc_file)
        reloaded = ConfigDocument.load(npmrc_file)
        assert reloaded.get("test") == "value"

    def test_entries_are_tagged(self):
        """Test entries expose their kind."""
        doc = ConfigDocument.loads(";note\nkey = value\n")
        assert doc.entries == (Comment("note"), Property("key", "value"))
        assert ConfigDocument(list(doc.entries)) == doc

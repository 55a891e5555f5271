"""Tests for string_resolver.cli module."""

import json
from pathlib import Path

import pytest

from string_resolver.cli import (
    load_config,
    main,
    parse_args,
    resolve_build_config,
    validate_directory,
)
from string_resolver.errors import ConfigurationError


class TestParseArgs:
    """Tests for parse_args function."""

    def test_parse_build_args(self):
        args = parse_args(["build", "content", "--ios", "--version=1.2.3", "-c", "en", "-c", "en-AU"])

        assert args.command == "build"
        assert args.content == Path("content")
        assert args.ios is True
        assert args.android is False
        assert args.version == "1.2.3"
        assert args.cultures == ["en", "en-AU"]
        assert args.code is False

    def test_ios_and_android_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["build", "content", "--ios", "--android"])

    def test_parse_diff_defaults(self):
        args = parse_args(["diff", "before", "after"])

        assert args.before == Path("before")
        assert args.after == Path("after")
        assert args.platform == "ios"
        assert args.version == "1.0.0"

    def test_parse_diff_platform(self):
        args = parse_args(["diff", "a", "b", "--platform", "android", "--version", "2.0.0"])
        assert args.platform == "android"
        assert args.version == "2.0.0"

    def test_invalid_diff_platform(self):
        with pytest.raises(SystemExit):
            parse_args(["diff", "a", "b", "--platform", "windows"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestBuildConfig:
    """Tests for load_config and resolve_build_config."""

    def write_config(self, temp_dir, config):
        path = temp_dir / "strings.config.json"
        path.write_text(json.dumps(config), encoding="utf-8")
        return path

    def test_flags_only(self):
        args = parse_args(["build", "content", "--android", "--version", "2.0.0", "-c", "en"])
        config = resolve_build_config(args)

        assert config["platform"] == "android"
        assert config["version"] == "2.0.0"
        assert config["cultures"] == ["en"]
        assert config["base_culture"] == "en"
        assert config["content_path"] == Path("content")
        assert config["output"] is None
        assert config["source_id"] == "content"

    def test_config_file_values(self, temp_dir):
        path = self.write_config(temp_dir, {
            "cultures": ["en", "en-AU"],
            "baseCulture": "en",
            "content": {"path": "app/content"},
            "output": {"strings": "out/strings.json"},
        })
        args = parse_args(["build", "--ios", "--version", "1.0.0", "--config", str(path)])
        config = resolve_build_config(args)

        assert config["cultures"] == ["en", "en-AU"]
        assert config["content_path"] == Path("app/content")
        assert config["output"] == Path("out/strings.json")
        assert config["source_id"] == "app/content"

    def test_flags_override_config(self, temp_dir):
        path = self.write_config(temp_dir, {"cultures": ["en"], "version": "1.0.0", "content": {"path": "a"}})
        args = parse_args(["build", "b", "--ios", "--version", "3.0.0", "-c", "fr", "--config", str(path)])
        config = resolve_build_config(args)

        assert config["version"] == "3.0.0"
        assert config["cultures"] == ["fr"]
        assert config["content_path"] == Path("b")

    @pytest.mark.parametrize("argv", [
        ["build", "content", "--version", "1.0.0", "-c", "en"],
        ["build", "content", "--ios", "-c", "en"],
        ["build", "content", "--ios", "--version", "1.0.0"],
        ["build", "--ios", "--version", "1.0.0", "-c", "en"],
    ])
    def test_missing_values_raise(self, argv):
        with pytest.raises(ConfigurationError):
            resolve_build_config(parse_args(argv))

    def test_unreadable_config(self, temp_dir):
        with pytest.raises(ConfigurationError):
            load_config(temp_dir / "missing.json")

    def test_config_must_be_object(self, temp_dir):
        path = self.write_config(temp_dir, ["en"])
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestValidateDirectory:
    """Tests for validate_directory function."""

    def test_valid_directory(self, temp_dir):
        validate_directory(temp_dir, "Content directory")

    def test_missing_directory(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            validate_directory(temp_dir / "missing", "Content directory")
        assert exc_info.value.code == 1

    def test_file_is_not_directory(self, temp_dir):
        path = temp_dir / "file.json"
        path.write_text("{}")
        with pytest.raises(SystemExit):
            validate_directory(path, "Content directory")


class TestMain:
    """Tests for main function."""

    def test_build_prints_tables(self, content_folders, capsys):
        before, _ = content_folders
        main(["build", str(before), "--ios", "--version=1.2.3", "-c", "en", "--no-progress"])

        result = json.loads(capsys.readouterr().out)
        assert result["platform"] == "ios"
        assert result["version"] == "1.2.3"
        assert result["sourceId"] == str(before)
        assert result["cultures"]["en"] == [
            {"key": "simpleString", "text": "This is iOS", "comment": "From Test iOS Entry"},
            {"key": "universalString", "text": "This is cross platform", "comment": "From Test Cross Platform Entry"},
        ]
        assert "accessors" not in result

    def test_build_with_code_to_file(self, content_folders, temp_dir):
        before, _ = content_folders
        output = temp_dir / "out" / "strings.json"
        main([
            "build", str(before), "--android", "--version=1.2.3", "-c", "en",
            "--code", "--output", str(output), "--no-progress",
        ])

        result = json.loads(output.read_text(encoding="utf-8"))
        assert result["accessors"][0] == {"key": "simpleString", "value": "This is Android", "isTemplate": False}

    def test_build_conflict_exits(self, temp_dir, write_content, document_factory, capsys):
        write_content(temp_dir, [
            document_factory("First", "en", [{"key": "k", "values": [{"value": "a"}]}]),
            document_factory("Second", "en", [{"key": "k", "values": [{"value": "b"}]}]),
        ])
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(temp_dir), "--ios", "--version=1.0.0", "-c", "en", "--no-progress"])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Failed to generate strings" in err
        assert "Conflicting key k" in err

    def test_build_invalid_version_exits(self, content_folders):
        before, _ = content_folders
        with pytest.raises(SystemExit) as exc_info:
            main(["build", str(before), "--ios", "--version=abc", "-c", "en", "--no-progress"])
        assert exc_info.value.code == 1

    def test_diff(self, content_folders, capsys):
        before, after = content_folders
        main(["diff", str(before), str(after), "--platform", "android", "--version", "0.0.1", "--no-progress"])

        assert json.loads(capsys.readouterr().out) == {"simpleString": {"en": "This is Android v2"}}

    def test_diff_missing_directory_exits(self, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            main(["diff", str(temp_dir / "a"), str(temp_dir / "b")])
        assert exc_info.value.code == 1

"""Tests for loading the declared provisioning sequence."""
import pytest

from macsetup.core.sequence_loader import build_sequence, load_definitions
from macsetup.models.errors import SequenceDefinitionError


class TestPackagedSequence:
    """Test the sequence shipped with macsetup."""

    def test_declared_order(self, expected_order):
        """Packaged steps appear in the documented order."""
        names = [d['name'] for d in load_definitions()]
        assert names == expected_order

    def test_startup_lines_declared(self, startup_lines):
        """Exactly three alias/init lines target the startup file."""
        lines = [d['line'] for d in load_definitions() if d['kind'] == 'startup_line']
        assert lines == startup_lines

    def test_build_sequence_binds_every_step(self, fake_host, config, expected_order):
        """Every definition becomes a Step."""
        sequence = build_sequence(fake_host, config)

        assert [s.name for s in sequence] == expected_order
        assert all(callable(s.presence_check) and callable(s.install_action) for s in sequence)

    def test_paths_expand_under_home(self, make_host, config, home):
        """~ in the sequence resolves against the configured home."""
        theme_dir = home / ".oh-my-zsh" / "custom" / "themes" / "powerlevel10k"
        host = make_host(dirs={theme_dir})
        sequence = {s.name: s for s in build_sequence(host, config)}

        assert sequence["powerlevel10k"].presence_check() is True
        assert sequence["zsh-autosuggestions"].presence_check() is False

    def test_presence_checks_have_no_side_effects(self, fake_host, config):
        """Evaluating every check runs no command and writes no file."""
        for step in build_sequence(fake_host, config):
            step.presence_check()

        assert fake_host.commands == []
        assert not config.startup_file.exists()
        assert not config.profile_file.exists()


class TestDefinitionValidation:
    """Test rejection of malformed sequence files."""

    def write(self, tmp_path, text):
        path = tmp_path / "sequence.yml"
        path.write_text(text)
        return path

    def test_missing_file(self, tmp_path):
        with pytest.raises(SequenceDefinitionError, match="not found"):
            load_definitions(tmp_path / "nope.yml")

    def test_empty_file(self, tmp_path):
        with pytest.raises(SequenceDefinitionError, match="non-empty 'steps'"):
            load_definitions(self.write(tmp_path, ""))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(SequenceDefinitionError, match="invalid YAML"):
            load_definitions(self.write(tmp_path, "steps: [\n"))

    def test_unknown_kind(self, tmp_path):
        path = self.write(tmp_path, "steps:\n  - name: x\n    kind: apt\n")
        with pytest.raises(SequenceDefinitionError, match="unknown kind"):
            load_definitions(path)

    def test_missing_field(self, tmp_path):
        path = self.write(tmp_path, "steps:\n  - name: x\n    kind: git_clone\n    url: u\n")
        with pytest.raises(SequenceDefinitionError, match="missing: path"):
            load_definitions(path)

    def test_duplicate_name(self, tmp_path):
        path = self.write(
            tmp_path,
            "steps:\n"
            "  - {name: tig, kind: formula, package: tig}\n"
            "  - {name: tig, kind: formula, package: tig}\n",
        )
        with pytest.raises(SequenceDefinitionError, match="Duplicate"):
            load_definitions(path)

    def test_unknown_startup_target(self, tmp_path):
        path = self.write(
            tmp_path,
            "steps:\n  - {name: x, kind: startup_line, line: 'a', file: bashrc}\n",
        )
        with pytest.raises(SequenceDefinitionError, match="unknown file"):
            load_definitions(path)

    def test_inline_definitions_validated(self, fake_host, config):
        """build_sequence validates definitions passed directly."""
        with pytest.raises(SequenceDefinitionError):
            build_sequence(fake_host, config, [{'name': 'x', 'kind': 'formula'}])

    def test_profile_line(self, fake_host, config):
        """startup_line can target the login profile instead."""
        sequence = build_sequence(
            fake_host,
            config,
            [{'name': 'path', 'kind': 'startup_line', 'line': 'export A=1', 'file': 'profile'}],
        )
        sequence[0].install_action()

        assert config.profile_file.read_text() == "export A=1\n"
        assert not config.startup_file.exists()

"""Tests for guarded appends to shell startup files."""
import pytest

from macsetup.core.startup_file import StartupFile


class TestAppendGuard:
    """Test line-presence guarded appends."""

    def test_append_twice_leaves_one_line(self, tmp_path):
        """Appending the same line twice yields exactly one occurrence."""
        zshrc = StartupFile(tmp_path / ".zshrc")

        assert zshrc.append_line("alias ls='eza'") is True
        assert zshrc.append_line("alias ls='eza'") is False

        assert zshrc.path.read_text().count("alias ls='eza'") == 1

    def test_missing_file_is_created(self, tmp_path):
        """A missing startup file holds no lines and is created on append."""
        path = tmp_path / "nested" / ".zshrc"
        zshrc = StartupFile(path)

        assert zshrc.has_line("alias cd='z'") is False
        zshrc.append_line("alias cd='z'")

        assert path.read_text() == "alias cd='z'\n"

    def test_existing_content_preserved(self, tmp_path):
        """Appends go after existing content, adding a missing newline."""
        path = tmp_path / ".zshrc"
        path.write_text("export EDITOR=vim")
        zshrc = StartupFile(path)

        zshrc.append_line('eval "$(zoxide init zsh)"')

        assert path.read_text() == 'export EDITOR=vim\neval "$(zoxide init zsh)"\n'

    def test_line_embedded_in_longer_line_counts(self, tmp_path):
        """Presence matches like grep -F: a containing line is enough."""
        path = tmp_path / ".zshrc"
        path.write_text("alias ls='eza'  # modern ls\n")
        zshrc = StartupFile(path)

        assert zshrc.has_line("alias ls='eza'") is True
        assert zshrc.append_line("alias ls='eza'") is False

    def test_mock_mode_does_not_write(self, tmp_path):
        """Mock mode reports the change without touching the file."""
        path = tmp_path / ".zshrc"
        zshrc = StartupFile(path, mock=True)

        assert zshrc.append_line("alias ls='eza'") is True
        assert not path.exists()

    def test_non_utf8_content_is_kept(self, tmp_path):
        """Bytes that are not valid UTF-8 neither break the guard nor get rewritten."""
        path = tmp_path / ".zshrc"
        original = b"# caf\xe9 latin-1 comment\nalias ls='eza'\n"
        path.write_bytes(original)
        zshrc = StartupFile(path)

        assert zshrc.has_line("alias ls='eza'") is True
        assert zshrc.append_line("alias cd='z'") is True

        assert path.read_bytes() == original + b"alias cd='z'\n"

    def test_directory_in_place_of_file_raises_oserror(self, tmp_path):
        """A directory at the startup file path surfaces as an OSError."""
        path = tmp_path / ".zshrc"
        path.mkdir()
        zshrc = StartupFile(path)

        with pytest.raises(OSError):
            zshrc.append_line("alias ls='eza'")

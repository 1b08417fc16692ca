from pathlib import Path

import pytest

from ftlutils.daemon.pidfile import NO_PID, get_pid_file_path, is_valid_pid, read_pid


class TestGetPidFilePath:
    def test_missing_conf_uses_default(self, temp_dir):
        default = temp_dir / "default.pid"

        assert get_pid_file_path(temp_dir / "pihole-FTL.conf", default) == default

    def test_empty_conf_uses_default(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.touch()
        default = temp_dir / "default.pid"

        assert get_pid_file_path(conf, default) == default

    def test_pidfile_from_conf(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_text("PRIVACYLEVEL=0\nPIDFILE=/tmp/x.pid\n")

        assert get_pid_file_path(conf, temp_dir / "default.pid") == Path("/tmp/x.pid")

    def test_conf_without_pidfile_uses_default(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_text("PRIVACYLEVEL=0\n#PIDFILE=/tmp/commented.pid\n")
        default = temp_dir / "default.pid"

        assert get_pid_file_path(conf, default) == default

    def test_first_pidfile_line_wins(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_text("PIDFILE=/tmp/first.pid\nPIDFILE=/tmp/second.pid\n")

        assert get_pid_file_path(conf, temp_dir / "default.pid") == Path("/tmp/first.pid")

    def test_value_after_first_equals(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_text("PIDFILE=/tmp/a=b.pid")

        assert get_pid_file_path(conf, temp_dir / "default.pid") == Path("/tmp/a=b.pid")

    def test_empty_pidfile_uses_default(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_text("PIDFILE=\n")
        default = temp_dir / "default.pid"

        assert get_pid_file_path(conf, default) == default

    def test_explicit_default(self, temp_dir):
        result = get_pid_file_path(default_pid_file="/run/pihole-FTL.pid", ftl_conf=temp_dir / "none")
        assert result == Path("/run/pihole-FTL.pid")

    def test_only_newline_separates_lines(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_bytes(b"NOTE=a\x0cPIDFILE=/tmp/ff.pid\nX=1\rPIDFILE=/tmp/cr.pid\n")
        default = temp_dir / "default.pid"

        assert get_pid_file_path(conf, default) == default

    def test_pidfile_after_non_newline_separator_line(self, temp_dir):
        conf = temp_dir / "pihole-FTL.conf"
        conf.write_bytes("NOTE=a\u2028b\nPIDFILE=/tmp/x.pid\n".encode("utf-8"))

        assert get_pid_file_path(conf, temp_dir / "default.pid") == Path("/tmp/x.pid")


class TestReadPid:
    def test_valid_pid(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_text("1234")

        assert read_pid(pid_file) == 1234

    def test_trailing_newline(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_text("1234\n")

        assert read_pid(pid_file) == 1234

    def test_zero_is_numeric_content(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_text("0")

        assert read_pid(pid_file) == 0

    def test_missing_file(self, temp_dir):
        assert read_pid(temp_dir / "pihole-FTL.pid") == NO_PID

    def test_empty_file(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.touch()

        assert read_pid(pid_file) == NO_PID

    @pytest.mark.parametrize(
        "content",
        ["12a4", "abc", "-5", " 12", "12 ", "12; rm -rf /", "1234\n5678"],
    )
    def test_invalid_content(self, temp_dir, content):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_text(content)

        assert read_pid(pid_file) == NO_PID

    def test_non_ascii_digits(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_bytes("\u0661\u0662\u0663".encode("utf-8"))

        assert read_pid(pid_file) == NO_PID

    def test_binary_content(self, temp_dir):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_bytes(b"\xff\xfe12")

        assert read_pid(pid_file) == NO_PID

    def test_directory(self, temp_dir):
        assert read_pid(temp_dir) == NO_PID

    def test_invalid_content_is_logged(self, temp_dir, caplog):
        pid_file = temp_dir / "pihole-FTL.pid"
        pid_file.write_text("$(reboot)")

        assert read_pid(pid_file) == NO_PID
        assert "Ignoring invalid content" in caplog.text


class TestIsValidPid:
    def test_valid(self):
        assert is_valid_pid("1")
        assert is_valid_pid("4194304")
        assert is_valid_pid("0")
        assert is_valid_pid("007")

    def test_invalid(self):
        assert not is_valid_pid("")
        assert not is_valid_pid("+1")
        assert not is_valid_pid("1.0")

import pytest

from craftlink.logger import log
from craftlink.paths import HOME_ENV, LOGS_DIR, ROOT_DIR


@pytest.fixture
def logs_dir(tmp_path, monkeypatch):
    monkeypatch.setenv(HOME_ENV, str(tmp_path))
    return tmp_path / ROOT_DIR / LOGS_DIR


def test_log_line_format(logs_dir):
    entry = log("client.log", -1, "Failed to send info request packet to server.")
    timestamp, rest = entry.split(":\t", 1)
    assert timestamp.isdigit()
    assert rest == "-1 'Failed to send info request packet to server.'"


def test_log_creates_directory_and_writes(logs_dir):
    assert not logs_dir.exists()
    entry = log("server.log", 0, "Client accepted!")
    content = (logs_dir / "server.log").read_text(encoding="utf-8")
    assert content == entry + "\n"


def test_log_appends(logs_dir):
    first = log("server.log", 0, "one")
    second = log("server.log", 5, "two")
    lines = (logs_dir / "server.log").read_text(encoding="utf-8").splitlines()
    assert lines == [first, second]


def test_log_files_are_separate(logs_dir):
    client_entry = log("client.log", 0, "from client")
    server_entry = log("server.log", 0, "from server")
    assert client_entry.endswith("\t0 'from client'")
    assert server_entry.endswith("\t0 'from server'")
    assert (logs_dir / "client.log").read_text(encoding="utf-8") == client_entry + "\n"
    assert (logs_dir / "server.log").read_text(encoding="utf-8") == server_entry + "\n"


def test_log_echoes_to_stdout(logs_dir, capsys):
    entry = log("stream.log", 3, "Sent a sequence to the server.")
    assert capsys.readouterr().out == f"stream.log-{entry}\n"


def test_log_bool_flag_written_as_int(logs_dir):
    entry = log("client.log", True, "Attempted to connect to client.")
    assert "\t1 'Attempted to connect to client.'" in entry


def test_log_timestamps_do_not_decrease(logs_dir):
    first = log("server.log", 0, "a")
    second = log("server.log", 0, "b")
    assert int(first.split(":")[0]) <= int(second.split(":")[0])
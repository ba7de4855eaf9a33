import io
import socket

import pytest

from craftlink import client
from craftlink.commands import cmd_help
from craftlink.connection import Connection, ConnectionError_
from craftlink.packet import ActionType
from craftlink.paths import current_path


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("CRAFTLINK_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def pair(home):
    a, b = socket.socketpair()
    left, right = Connection(a), Connection(b)
    yield left, right
    left.close()
    right.close()


@pytest.fixture
def listener(home):
    server = Connection()
    server.open()
    server.serve(0)
    yield server
    server.close()


def test_run_ui_prints_prompt_and_output(pair, monkeypatch, capsys):
    left, _ = pair
    monkeypatch.setattr("sys.stdin", io.StringIO("help\n"))
    client.run_ui(left)
    out = capsys.readouterr().out
    assert cmd_help() in out
    assert out.count(f"ClientUI @ {current_path()} > ") == 2


def test_run_ui_sends_messages(pair, monkeypatch):
    left, right = pair
    monkeypatch.setattr("sys.stdin", io.StringIO("msg hi  there\n\n"))
    client.run_ui(left)
    packet = right.receive()
    assert packet.header.action_id == ActionType.MESSAGE
    assert packet.data == b"hi there"


def test_main_connects_and_runs(listener, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("msg hi\n"))
    assert client.main(["--port", str(listener.local_port)]) == 0
    accepted = listener.accept()
    try:
        assert accepted.receive().data == b"hi"
        with pytest.raises(ConnectionError_):
            accepted.receive()
    finally:
        accepted.close()


def test_main_fails_without_server(monkeypatch):
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert client.main(["--port", str(port)]) == 1
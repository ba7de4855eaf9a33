import io
import socket
import time

import pytest

from craftlink import commands
from craftlink.connection import Connection
from craftlink.packet import ActionType, Packet, PktType
from craftlink.paths import FILES_DIR, LOGS_DIR, root_path


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("CRAFTLINK_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def pair(home):
    a, b = socket.socketpair()
    client, server = Connection(a), Connection(b)
    yield client, server
    client.close()
    server.close()


def test_empty_command_gives_nothing(pair):
    client, _ = pair
    assert commands.parse_command(client, []) == ""


def test_unknown_command(pair):
    client, _ = pair
    assert commands.parse_command(client, ["bogus"]) == commands.UNKNOWN_COMMAND
    assert "'help'" in commands.parse_command(client, ["bogus", "x"])


def test_help_dispatch(pair):
    client, _ = pair
    text = commands.parse_command(client, ["help"])
    assert text == commands.cmd_help()
    assert "GoogCraftImages - Client CLI Help Menu" in text
    assert "push <filename>" in text


def test_pull_returns_empty(pair):
    client, _ = pair
    assert commands.parse_command(client, ["pull", "a.txt"]) == ""


def test_push_sends_whole_sequence(pair):
    client, server = pair
    files = root_path() / FILES_DIR
    files.mkdir(parents=True)
    (files / "f.txt").write_bytes(b"hello")

    result = commands.parse_command(client, ["push", "f.txt"])
    assert result == "Successfully sent file f.txt to the server!\n"

    first = server.receive()
    assert first.header.action_id == ActionType.UPLOAD
    assert first.header.sequence_num == 0
    assert first.data == b"f.txt"
    data = server.receive()
    assert data.header.sequence_num == 1
    assert data.data == b"hello"
    final = server.receive()
    assert final.header.sequence_num == 2
    assert final.header.data_size == 0


def test_push_missing_file(pair):
    client, _ = pair
    assert commands.cmd_push(client, ["absent.txt"]) == "Error -1 when sending sequences.\n"


def test_push_without_open_socket():
    files = root_path() / FILES_DIR
    files.mkdir(parents=True)
    (files / "f.txt").write_bytes(b"abc")
    assert commands.cmd_push(Connection(), ["f.txt"]) == "Error -1 when sending sequences.\n"


def test_push_without_filename(pair):
    client, _ = pair
    assert commands.cmd_push(client, []).startswith("Usage")


def test_info_round_trip(pair):
    client, server = pair
    server.send(
        Packet(
            ActionType.INFO,
            PktType.ACK,
            0,
            b"Server Info: Version 1.0.0, Uptime: 24h\x00",
        )
    )
    before = time.time_ns() // 1_000_000
    result = commands.parse_command(client, ["info"])
    after = time.time_ns() // 1_000_000

    lines = result.split("\n")
    assert lines[0] == "Server Info: Version 1.0.0, Uptime: 24h"
    assert lines[1].startswith("Response Time: ")
    assert lines[1].endswith(" ms")
    assert result.endswith("\n")

    request = server.receive()
    assert request.header.action_id == ActionType.INFO
    assert request.header.pkt_type == PktType.ACTION
    stamp = int.from_bytes(request.data, "little", signed=True)
    assert before <= stamp <= after


def test_info_send_failure():
    assert commands.cmd_info(Connection()) == "Failed to request server info.\n"


def test_info_receive_failure(pair):
    client, server = pair
    server._sock.shutdown(socket.SHUT_WR)
    assert commands.cmd_info(client) == "Failed to receive server response.\n"


def test_ls_lists_directories(capsys):
    logs = root_path() / LOGS_DIR
    logs.mkdir(parents=True)
    (logs / "x.log").write_text("entry")
    assert commands.cmd_ls() == ""
    out = capsys.readouterr().out
    assert "x.log" in out
    assert "does not exist." in out


def test_msg_sends_joined_words(pair):
    client, server = pair
    result = commands.parse_command(client, ["msg", "hello", "world"])
    assert result == "Successfully sent custom message\n"
    packet = server.receive()
    assert packet.header.action_id == ActionType.MESSAGE
    assert packet.data == b"hello world"


def test_msg_failure():
    assert commands.cmd_msg(Connection(), ["hi"]) == "Error sending custom message\n"


def test_telem_sends_preset(pair, monkeypatch):
    client, server = pair
    monkeypatch.setattr("sys.stdin", io.StringIO("2\n"))
    assert commands.parse_command(client, ["telem"]) == "Telemetry data sent successfully.\n"
    packet = server.receive()
    assert packet.header.action_id == ActionType.TELEMETRY
    assert int.from_bytes(packet.data, "little", signed=True) == 2
    assert packet.header.data_size == 4


def test_telem_bad_input(pair, monkeypatch):
    client, _ = pair
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n"))
    assert commands.cmd_telem(client, []) == "Invalid telemetry preset.\n"


def test_telem_send_failure(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("1\n"))
    assert commands.cmd_telem(Connection(), []) == "Failed to send telemetry data.\n"
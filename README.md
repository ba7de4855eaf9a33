# craftlink

A small TCP client and server that talk in framed packets. The client can
upload files, send text messages, ask the server for information and send a
telemetry preset. The server stores uploaded files and keeps logs in a per-user
application data directory.

## Installing

```
pip install .
```

## Running

Start the server. By default it listens on port 8186 on every interface:

```
craftlink-server
craftlink-server --port 9000
```

While it runs, the server reads the console: type `1` to list the log files or
`2` to list the files it has received. Any other character prints `Bad Input`.
The server serves one client at a time and goes back to waiting for the next
one when a client disconnects.

Start the client in another terminal. By default it connects to
`127.0.0.1:8186`:

```
craftlink-client
craftlink-client --host 127.0.0.1 --port 9000
```

The prompt shows the current directory and takes these commands, until end of
input:

| Command           | What it does                                                  |
|-------------------|---------------------------------------------------------------|
| `help`            | Show the command list                                         |
| `push <filename>` | Upload a file from the program's directories to the server    |
| `pull <filename>` | Accepted, but does nothing (see below)                        |
| `info`            | Ask the server for its information and show the reply time    |
| `ls`              | List the log files and the stored files                       |
| `msg <message>`   | Send the words, joined by single spaces, as one message        |
| `telem`           | Ask for a preset number (1 to 3) and send it to the server    |

Any words after `telem` are ignored; the preset is read from the next line of
input.

## Files

Everything lives under a `GoogCraftImages/` directory inside the user's roaming
application data directory (as `platformdirs` reports it). Setting the
`CRAFTLINK_HOME` environment variable uses that directory as the base instead.
Below it are `logs/` and `files/`.

`push <filename>` looks for the file by name in `logs/` first and then in
`files/`; it does not read from the current directory. The server saves an
upload under the name `DL-<filename>`, in `logs/` if a log of that name already
exists there and in `files/` otherwise.

Logs are written to `client.log`, `server.log`, `socket.log`, `stream.log` and
`message.log` in `logs/`. Each line holds a nanosecond timestamp, a status
number and the message, and is also echoed to standard output. Messages sent
with `msg` end up in the server's `message.log`.

## Wire format

Each packet is a 6-byte little-endian header (action, packet type, 16-bit
sequence number, 16-bit data size, no padding), up to 65535 bytes of data, and
a one-byte checksum: the XOR of the header fields and every data byte.

An upload is a packet with sequence 0 carrying the file name, data packets
numbered from 1 carrying chunks of up to 65535 bytes, and a final empty packet.
The server answers every packet with a data-less reply of the same action,
marked `ACK` or `NACK`; for info and telemetry requests it first sends a
separate reply of its own.

## Library use

- `craftlink.packet`: `ActionType`, `PktType`, `PacketHeader` (`pack`,
  `unpack`) and `Packet` (`set_packet`, `copy_data`, `make_response`,
  `calculate_checksum`, `describe`, `serialize`, `len(packet)`). Bad input
  raises `PacketError`.
- `craftlink.connection`: `Connection` with `open`, `connect`, `serve`,
  `accept`, `send`, `receive` and `close`; it is also a context manager.
  Failures raise `ConnectionError_`, whose `code` tells which step failed.
- `craftlink.stream`: `stream_out_file` and `send_custom_message`.
- `craftlink.upload`: `State` and `UploadReceiver` (`begin`, `add_data`,
  `finish`), which assembles an upload on the server side.
- `craftlink.server`: `handle_packet`, `handle_client`, `serve_forever`.
- `craftlink.commands`: `parse_command` and the `cmd_*` functions behind the
  client prompt.
- `craftlink.paths` and `craftlink.logger`: directory lookup, listing and
  logging.

## What it does not do

- Files cannot be downloaded from the server. `pull` returns without doing
  anything, and the server answers a download request with `ACK` but sends no
  file.
- Delete and position requests are acknowledged by the server and have no
  other effect.
- The server's info reply is a fixed text; it does not measure its uptime.
- Connections are plain TCP with no authentication or encryption.

## Tests

```
pip install .[test]
pytest
```
# sockdemo

A handful of small TCP programs built on the standard `socket` module.
Each one is a command of its own and also a module you can import. The
package has no dependencies outside the standard library.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Commands

Every command takes `--host` and `--port`; the defaults are given below.

### Broadcast relay server

    sockdemo-broadcast [--host HOST] [--port 8080] [--max-clients 100]

Listens on port 8080 on all interfaces. Whatever a client sends (up to
1024 bytes per read, cut at the first NUL byte) is printed on the server
and passed on to every other connected client. It holds up to
`--max-clients` clients at once; a connection that arrives when every
slot is taken is closed straight away. Connections and disconnections are
reported as they happen. Stop it with Ctrl-C.

In code, `sockdemo.broadcast.BroadcastServer(host, port, max_clients, out)`
does the same job. Its `address` attribute holds the bound address,
`poll(timeout)` handles whatever is ready and returns how many sockets it
handled, `serve_forever()` loops on `poll`, and `close()` (or a `with`
block) closes every connection and the listening socket.

### Turn-based chat

    sockdemo-chat-server [--host HOST] [--port 8080]
    sockdemo-chat-client [--host 127.0.0.1] [--port 8080]

The server waits for one client. The client types a line, the server sees
it and types a reply, and so on in turn. The chat ends when the server's
reply starts with `exit` (both sides stop), or when either side's input
ends or the connection closes.

Each message travels as one 80-byte frame padded with NUL bytes.
`sockdemo.chat.pack_message(text)` builds a frame and raises `ValueError`
if the text is longer than 80 bytes in UTF-8;
`sockdemo.chat.unpack_message(data)` reads one back. `client_session` and
`server_session` run a chat over an already connected socket, and
`run_client` and `run_server` open the connection first. Each takes the
input and output streams to use, defaulting to standard input and output.

### Line client

    sockdemo-line-client [--host 192.168.0.255] [--port 8080]

Connects to a server, sends each line you type (without its newline) and
prints what comes back as `Echo from server: ...`. Typing `exit`, ending
input, or the server closing the connection ends the session. The host
must be a numeric IPv4 address; anything else is reported as an invalid
address. Note the default host is `192.168.0.255`, so you will usually
want to pass `--host`.

`sockdemo.lineclient.session(sock, stdin, stdout)` runs the exchange over
a connected socket and `sockdemo.lineclient.run(host, port, stdin, stdout)`
connects first.

### File transfer

    sockdemo-file-server [--file test.bmp] [--host HOST] [--port 5005]
    sockdemo-file-client [--file received.bmp] [--host 127.0.0.1] [--port 5005]

The server opens the file, waits for one client, sends it the file's size
as an 8-byte little-endian signed integer followed by the contents, and
exits. The client reads the size and writes that many bytes (or as many as
arrive before the connection closes) to its `--file`.

`sockdemo.filetransfer.send_file(sock, path)` and
`sockdemo.filetransfer.receive_file(sock, path)` do the same over any
connected socket and return the number of bytes sent or written.
`serve(path, host, port, out)` and `fetch(path, host, port, out)` are the
functions behind the two commands.

### Readers-writers server

    sockdemo-rw-server [--host HOST] [--port 8989] [--hold 5.0]

Listens on port 8989. Each client sends a 4-byte little-endian integer:
`1` starts a reader, `2` starts a writer; the connection is then closed
and any other value is ignored. Readers share the resource and each stays
inside for `--hold` seconds; a writer waits until no reader is inside.
The server prints each one entering and leaving, and waits for the
started threads to finish after every 50 of them. Stop it with Ctrl-C.

The locking lives in `sockdemo.readerswriters.ReadersWriters(hold, out)`,
whose `reader()` and `writer()` methods run one reader or writer in the
calling thread. `ReadersWritersServer(host, port, hold, out)` puts it
behind a socket: `handle(conn)` reads one choice and returns the started
thread (or `None`), `serve_forever()` accepts clients until `close()` is
called, and `join_all()` waits for the started threads and returns how
many there were.

## What it does not do

There is no dedicated client for the broadcast relay or for the
readers-writers server; use the line client (or any TCP tool) for the
former, and send the 4-byte choice yourself for the latter. Nothing is
encrypted or authenticated, and only IPv4 is used.
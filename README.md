# basnet

Building blocks for threaded network clients and services, with no
dependencies beyond the standard library.

- `basnet.io_service_pool`
  - `IoService` is a queue of handlers. `post()` adds a handler, and `run()`
    executes handlers in order. It returns the number it ran once the queue is
    empty and no work is registered, or once `stop()` is called.
    `add_work()` and `remove_work()` keep `run()` waiting for new handlers.
    `remove_work()` raises `RuntimeError` when no work is registered.
    `restart()` clears the stopped state.
  - `IoServicePool` holds `init_size` services and runs each on its own daemon
    thread.
    - `start(blocked=False)` starts the threads. `run()` starts them in
      blocking mode.
    - `stop(force=False)` releases the work. With `force=True` it also stops
      every service at once.
    - `get_io_service()` hands services out round-robin.
      `get_io_service(load)` first adds and starts a new service when
      `load // thread_load` exceeds the current size and the size is below
      `high_watermark`. This happens only in non-blocking mode.
    - `configure()` changes the parameters while no threads are running.
    - `size()`, `idle()` and the `thread_load` and `started` properties report
      the pool's state.
    - The pool is a context manager that starts on entry and stops on exit.
    - Invalid sizes raise `ValueError`.
- `basnet.endpoints`
  - `Endpoint(host, port)` is a frozen address. Its default is
    `0.0.0.0:0`.
  - `EndpointGroup` keeps `(peer, local)` pairs. `add()` appends a pair,
    `next_pair()` hands pairs out round-robin, and `pair_at(index)` returns one
    pair. Both return a pair of default endpoints when nothing matches.
    `len()` gives the number of pairs.
- `basnet.handler_pool`
  - `HandlerPool` keeps idle handlers built by a factory you supply. `init()`
    opens the pool and creates `init_size` handlers.
  - `acquire()` takes an idle handler, or returns `None` if none arrives within
    `wait_ms`.
    - When the idle count is at or below `low_watermark`, it first creates
      `increment` more handlers, as long as the live count is below
      `maximum`.
  - `release(handler)` gives a handler back. The handler is cleared and
    dropped instead when any of these holds:
    - the pool is closed;
    - its `error` is set and is not a shutdown error;
    - `high_watermark` idle handlers are already held.
  - `close()` discards every idle handler. `handler_count()` and the
    `available` and `closed` properties report counts and state.
  - `SyncClient(pool, io_pool=None)` starts the given service pool, if any, and
    calls `pool.init()` on construction. `stop()` closes the handler pool and
    then stops the service pool. `acquire()` takes a handler. The client is a
    context manager that stops on exit.
- `basnet.error_count`: `ErrorCount` is a thread-safe counter. `timeout()` and
  `error()` add one each, the `timeouts` and `errors` properties read the
  counts, and `reset()` sets both back to zero.
- `basnet.http.mime_types`: `extension_to_type()` maps `gif`, `htm`, `html`,
  `jpg` and `png` to their MIME types. Any other extension maps to
  `text/plain`.
- `basnet.http.reply`
  - `Status` is an `IntEnum` of the supported codes.
  - `Header(name, value)` is one header line.
  - `Reply` holds a status, headers and content bytes. `to_buffers()` returns
    the wire chunks, `to_bytes()` joins them, and `reset()` drops the headers
    and content.
  - `Reply.stock_reply(status)` builds the standard HTML page for a status.
    Unknown statuses get the 500 page and status line.
- `basnet.http.request_handler`
  - `url_decode()` decodes `%xx` escapes and turns `+` into a space. It raises
    `ValueError` on a malformed escape.
  - `RequestHandler(doc_root).handle_request(uri)` returns a `Reply` for a file
    under the document root.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example: a service pool

```python
from basnet.io_service_pool import IoServicePool

pool = IoServicePool(init_size=4, high_watermark=32, thread_load=100)
pool.start(blocked=False)

service = pool.get_io_service()
service.post(lambda: print("handled on a pool thread"))

pool.stop(force=False)
```

## Example: a handler pool

The factory is called as
`factory(io_service, peer, local, buffer_size, timeout_ms)`. The handler it
returns needs an `error` attribute and a `clear()` method.

```python
from basnet.endpoints import Endpoint, EndpointGroup
from basnet.handler_pool import HandlerPool, SyncClient
from basnet.io_service_pool import IoServicePool


class Handler:
    def __init__(self, io_service, peer, local, buffer_size, timeout_ms):
        self.peer = peer
        self.error = None

    def clear(self):
        pass


io_pool = IoServicePool(init_size=2, high_watermark=2)
endpoints = EndpointGroup().add(Endpoint("127.0.0.1", 1000))
pool = HandlerPool(io_pool, endpoints, Handler, init_size=4)

with SyncClient(pool, io_pool) as client:
    handler = client.acquire()
    if handler is not None:
        try:
            ...  # use the handler
        finally:
            pool.release(handler)
```

## Example: serving a file

```python
from basnet.http.request_handler import RequestHandler

handler = RequestHandler("/srv/www")
reply = handler.handle_request("/index.html")
wire = reply.to_bytes()
```

How `handle_request()` answers:

- A URI that fails to decode, is not absolute, or contains `..` gets the stock
  `400 Bad Request` reply.
- A file that cannot be opened gets `404 Not Found`.
- A path ending in `/` is served as `index.html` from that directory.
- A successful reply carries `Content-Length` and `Content-Type` headers.

## What the package does not do

The package opens no sockets.

- Handlers for `HandlerPool` come from your factory, so connecting, reading and
  writing are up to them.
- There is no HTTP server. Nothing accepts connections or parses requests;
  `RequestHandler` only turns a URI into a `Reply`.
- There is no command-line program.
"""
=============================================================================
STATICSERVER - A MINIMAL STATIC FILE SERVER
=============================================================================

Serves .html, .css and .js files from one directory over a deliberately
small subset of HTTP/1.1, built directly on sockets.

    Client                                   staticserver
      │                                           │
      │  GET /css/site.css HTTP/1.1\r\n ...       │
      │ ────────────────────────────────────────► │  read ONE line
      │                                           │  decode, check, resolve
      │  HTTP/1.1 200 OK\r\n                      │
      │  Content-Type: text/css\r\n               │
      │  Content-Length: 1234\r\n                 │
      │  \r\n                                     │
      │  <file bytes>                             │
      │ ◄──────────────────────────────────────── │
      │                                        close()

=============================================================================
PACKAGE LAYOUT
=============================================================================

    staticserver/
    ├── __main__.py       CLI: python -m staticserver
    ├── config.py         ServerConfig dataclass
    ├── server.py         StaticServer: wires acceptor → handler
    ├── access_log.py     RequestLog: append-only log of error responses
    ├── core/
    │   ├── socket_server.py   TCP acceptor
    │   ├── connection.py      one client socket
    │   └── dispatch.py        thread-per-connection dispatch
    ├── handlers/
    │   ├── static.py     request → response decisions
    │   └── errors.py     error.html template / fallback page
    └── http/
        ├── request.py    request-line parsing
        ├── response.py   response serialization
        ├── status_codes.py
        └── mime_types.py extension allow-list and content types

=============================================================================
QUICK START
=============================================================================

    from staticserver import StaticServer, ServerConfig

    StaticServer(ServerConfig(port=8080, web_root="./public")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import StaticServer
from .config import ServerConfig

__all__ = ["StaticServer", "ServerConfig", "__version__"]

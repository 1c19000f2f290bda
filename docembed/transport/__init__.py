"""Outbound HTTP transport.

- ``http_transport`` -- :class:`HttpTransport`, the one place requests are sent.
- ``streaming`` -- :class:`CancellationToken` and :class:`ChatStream`.

Import from the submodules directly; the models package depends on
``streaming`` and ``http_transport`` depends on the models package.
"""

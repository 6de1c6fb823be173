"""Out-of-process transport: wire contracts, stdio worker, and its client.

Submodules are imported explicitly (``transport.protocol``,
``transport.worker``, ``transport.subprocess_client``) so that running the
worker with ``python -m`` does not import it twice.
"""

"""Transport adapters (HTTP and websocket)."""

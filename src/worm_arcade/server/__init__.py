"""HTTP and WebSocket transport for worm games."""

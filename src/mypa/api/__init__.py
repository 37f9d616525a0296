"""HTTP and WebSocket API for the page."""

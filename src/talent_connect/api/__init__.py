"""HTTP and WebSocket API for Talent Connect."""

"""WebSocket protocol handlers for the /ws endpoint."""

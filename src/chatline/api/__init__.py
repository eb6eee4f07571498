"""HTTP and WebSocket API for Chatline."""

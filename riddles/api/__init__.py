"""HTTP API: app factory, routers and response envelopes."""

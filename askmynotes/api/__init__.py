"""HTTP API: FastAPI app, routers and dependencies."""

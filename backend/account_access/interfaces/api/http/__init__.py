"""HTTP interface (FastAPI routers, schemas, error mapping)."""

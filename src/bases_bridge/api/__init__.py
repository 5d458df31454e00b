"""REST API for base queries, upserts and semantic search."""

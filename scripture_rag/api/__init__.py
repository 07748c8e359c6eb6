"""HTTP API exposing retrieval, prompt composition and grounded chat."""

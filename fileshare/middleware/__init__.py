"""Cross-cutting middleware: metrics, error handling, rate limiting."""

"""Command-line entrypoint for the BigQuery MCP server."""

"""HTTP API for the Rogha application."""

"""Server: config, database schema and the app entry point (see server.main)."""

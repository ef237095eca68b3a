"""Error handling and logging shared by the engine and the CLI."""

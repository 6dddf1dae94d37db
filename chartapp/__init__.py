"""Application layer around chartcore: settings, config files and CLI."""

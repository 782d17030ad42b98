"""PluginGuard command-line interface."""

"""CLI subcommands for specshard."""

"""Declaration front end — TOML files to :class:`~guardtype.dispatch.Declaration`."""

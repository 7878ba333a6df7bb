"""cfgd — render structured system configuration into native OS artifacts."""

__version__ = "0.1.0"

IDENT = f"cfgd v{__version__}"

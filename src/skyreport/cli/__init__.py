from skyreport.cli.root import cli, create_app, main

__all__ = ["cli", "create_app", "main"]

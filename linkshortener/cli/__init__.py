from linkshortener.cli.app import main


__all__ = [
    'main',
]

# adoption_risk/__main__.py
"""Entry point for `python -m adoption_risk`."""

from adoption_risk.cli import app

if __name__ == "__main__":
    app()

# evapurge/__main__.py
from evapurge.cli import app

if __name__ == "__main__":
    app()

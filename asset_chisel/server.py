#setup: pip install -e .
#setup: flask --app asset_chisel.server run --port 5000 --debug

from __future__ import annotations

from asset_chisel.app import create_app
from asset_chisel.config import load_settings
from asset_chisel.log import setup_logging

settings = load_settings()
setup_logging(settings.log_level)

app = create_app(settings)


def main() -> None:
    app.run(port=settings.port, debug=settings.env == "dev")


if __name__ == "__main__":
    main()

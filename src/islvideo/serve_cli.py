"""CLI for the HTTP surface — run the Flask app.

Usage:
    islvideo serve --config islvideo.yaml --port 5000
"""

import argparse

from .config import add_config_args, config_from_args
from .web import create_app


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Serve the sign-language video HTTP API.",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    add_config_args(parser)
    parsed = parser.parse_args(args)

    config = config_from_args(parsed)
    app = create_app(config)
    print(f"Dataset: {config['dataset']['root']}")
    print(f"Output:  {config['output']['dir']}")
    app.run(host=parsed.host, port=parsed.port, threaded=True)


if __name__ == "__main__":
    main()

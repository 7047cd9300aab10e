"""Development server entry point (``fileshare-server``)."""
import logging

from fileshare import create_app
from fileshare.config.settings import get_config


def main() -> None:
    config = get_config()
    app = create_app(config)
    logger = logging.getLogger(__name__)

    graphql_path = config.GRAPHQL_PATH
    logger.info(f"GraphQL ready at http://localhost:{config.PORT}{graphql_path}")
    logger.info(f"Subscriptions ready at ws://localhost:{config.PORT}{graphql_path}")

    # Threaded so each WebSocket connection gets its own thread
    app.run(host="0.0.0.0", port=config.PORT, threaded=True, debug=False)


if __name__ == "__main__":
    main()

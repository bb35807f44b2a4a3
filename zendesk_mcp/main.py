import json
import logging
import sys

from zendesk_mcp.config import Config, ConfigError
from zendesk_mcp.core.dispatcher import Dispatcher
from zendesk_mcp.core.stdio import StdioServer
from zendesk_mcp.core.zendesk_client import ZendeskClient

logger = logging.getLogger(__name__)


def main() -> int:
    # stdout carries protocol messages only; logs go to stderr
    logging.basicConfig(level=logging.INFO, stream=sys.stderr,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        config = Config.load()
    except ConfigError as e:
        print(f"Failed to start server: {e}", file=sys.stderr)
        return 1

    logging.getLogger().setLevel(config.server.log_level)
    logger.info(json.dumps({"event": "config_loaded", "config": config.mask_secrets()}, ensure_ascii=False))

    sys.stdin.reconfigure(encoding="utf-8", errors="replace")
    sys.stdout.reconfigure(encoding="utf-8")

    with ZendeskClient(config.zendesk) as client:
        server = StdioServer(Dispatcher(client, config.server))
        try:
            server.serve(sys.stdin, sys.stdout)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())

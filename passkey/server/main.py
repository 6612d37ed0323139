# passkey/server/main.py
import sys
import uvicorn
from passkey.common.config import load_cfg, secret_store
from passkey.common.log import setup_logger
from passkey.server.api import PassKeyServer, build_server_app

def build_app(cfg: dict, logger):
    server = PassKeyServer(
        secret_store(cfg),
        interval=cfg["interval_sec"],
        header_key=cfg["header_key"],
        logger=logger,
    )
    return build_server_app(server, logger)

def main():
    # InvalidSecretError is a ValueError; unreadable config or secret files are OSErrors
    try:
        cfg = load_cfg()
    except (ValueError, OSError) as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    logger = setup_logger("passkey-server", cfg["log_dir"])
    try:
        app = build_app(cfg, logger)
    except (ValueError, OSError) as e:
        logger.error(f"invalid configuration: {e}")
        sys.exit(1)
    uvicorn.run(app, host=cfg["listen_host"], port=cfg["listen_port"])

if __name__ == "__main__":
    main()

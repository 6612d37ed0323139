# passkey/client/main.py
import asyncio, sys
import httpx
from passkey.common.config import load_cfg, secret_store
from passkey.common.log import setup_logger
from passkey.client.client import PassKeyClient

async def poll(client: PassKeyClient, cfg: dict, logger, transport: httpx.AsyncBaseTransport | None = None) -> int:
    """
    Hit the guarded URL cfg["requests"] times, one third of an interval
    apart. Returns the number of successful calls; stops at the first
    failure.
    """
    url = cfg["base_url"].rstrip("/") + cfg["path"]
    pause = client.scheduler.interval / 3
    ok = 0
    async with httpx.AsyncClient(timeout=cfg["timeout_sec"], auth=client.auth, transport=transport) as c:
        for _ in range(cfg["requests"]):
            try:
                r = await c.get(url)
            except httpx.HTTPError as e:
                logger.error(f"request failed url={url} err={e}")
                return ok
            if r.status_code != 200:
                logger.error(f"http: {r.status_code}")
                return ok
            logger.info(r.text)
            ok += 1
            await asyncio.sleep(pause)
    return ok

def build_client(cfg: dict, logger) -> PassKeyClient:
    return PassKeyClient(
        secret_store(cfg),
        interval=cfg["interval_sec"],
        header_key=cfg["header_key"],
        logger=logger,
    )

async def run(client: PassKeyClient, cfg: dict, logger) -> int:
    task = client.start()
    if client.scheduler.generated_secret:
        print(client.scheduler.generated_secret, flush=True)
    try:
        return await poll(client, cfg, logger)
    finally:
        client.stop()
        await task

def main():
    # InvalidSecretError is a ValueError; unreadable config or secret files are OSErrors
    try:
        cfg = load_cfg()
    except (ValueError, OSError) as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    logger = setup_logger("passkey-client", cfg["log_dir"])
    try:
        client = build_client(cfg, logger)
    except (ValueError, OSError) as e:
        logger.error(f"invalid configuration: {e}")
        sys.exit(1)
    ok = asyncio.run(run(client, cfg, logger))
    sys.exit(0 if ok == cfg["requests"] else 1)

if __name__ == "__main__":
    main()

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any, Optional

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException, Request

from .config import load_config
from .config_models import Config
from .github_client import GithubRepoContext, split_full_name
from .pipeline import run_check


logger = logging.getLogger(__name__)


def verify_signature(secret: Optional[str], body: bytes, signature: Optional[str]) -> bool:
    """Prüft `X-Hub-Signature-256`; ohne Secret wird alles akzeptiert."""
    if not secret:
        return True
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(f"sha256={expected}", signature)


async def run_for_repository(full_name: str, config: Config) -> None:
    """Top-level run handler: logs failures, never raises."""
    try:
        owner, name = split_full_name(full_name)
        async with GithubRepoContext(
            owner,
            name,
            token=config.github.token,
            api_url=config.github.api_url,
            timeout_s=config.github.timeout_s,
        ) as repo:
            result = await run_check(repo, config)
        logger.info(
            "Check for %s done: %d links, %d broken, issue %s",
            full_name,
            len(result.records),
            len(result.invalid),
            result.action.value,
        )
    except Exception as e:
        logger.error(f"Error in scheduled check for {full_name}: {e}")


def create_app(config: Optional[Config] = None) -> FastAPI:
    config = config or load_config()
    app = FastAPI(title="link-checker", version="0.1.0")

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        return {"ok": True}

    @app.post("/webhook")
    async def webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_github_event: Optional[str] = Header(default=None),
        x_hub_signature_256: Optional[str] = Header(default=None),
    ) -> dict[str, Any]:
        body = await request.body()
        if not verify_signature(config.webhook.secret, body, x_hub_signature_256):
            raise HTTPException(status_code=401, detail="invalid signature")

        if x_github_event not in config.webhook.events:
            return {"accepted": False, "reason": f"ignored event {x_github_event!r}"}

        try:
            payload = await request.json()
            full_name = str(payload["repository"]["full_name"])
        except (ValueError, KeyError, TypeError):
            raise HTTPException(
                status_code=400, detail="payload without repository.full_name"
            ) from None

        logger.info(f"Running scheduled check for {full_name}")
        background_tasks.add_task(run_for_repository, full_name, config)
        return {"accepted": True, "repository": full_name}

    return app


app = create_app()

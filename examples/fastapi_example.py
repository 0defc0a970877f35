"""Example FastAPI application instrumenting creative agent operations.

Run with:
    uvicorn examples.fastapi_example:app --reload

Sinks are read from AGENTOBS_LOG_SINK_URL and AGENTOBS_METRICS_SINK_URL;
without them records stay in memory only.

Endpoints:
    /agents/{agent_id}/publish?actor_id=<id>  - tracked publish (fails ~20%)
    /agents/{agent_id}/generate?actor_id=<id> - tracked, slow generation
    /obs/analytics?window_ms=<ms>            - windowed analytics (JSON)
    /obs/logs?level=<level>&limit=<n>        - recent logs (NDJSON)
    /obs/alerts                              - critical and warning alerts
    /obs/metrics                             - Prometheus text format
    /obs/export/json, /obs/export/csv        - snapshot exports
"""

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from agentobs import AgentLogHandler, ObservabilityConfig, ObservabilityContext
from agentobs.adapters.frameworks.fastapi import create_observability_router

logging.basicConfig(level=logging.INFO)

obs = ObservabilityContext(ObservabilityConfig.from_env())

# Application logs on the "app" logger are recorded as agent logs too.
logging.getLogger("app").addHandler(AgentLogHandler(obs.recorder))
app_logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    obs.close()


app = FastAPI(title="Agent Observability Example", lifespan=lifespan)
app.include_router(create_observability_router(obs), prefix="/obs")


async def _publish(agent_id: str) -> dict[str, str]:
    await asyncio.sleep(random.uniform(0.01, 0.1))
    if random.random() < 0.2:
        raise ConnectionError("IPFS pinning timeout")
    return {"agent_id": agent_id, "cid": f"bafy{random.getrandbits(64):x}"}


@app.get("/agents/{agent_id}/publish")
async def publish(agent_id: str, actor_id: str = "") -> dict[str, str]:
    """Publish a creation, recording a metric sample either way."""
    try:
        return await obs.track(
            "publish",
            agent_id,
            actor_id,
            lambda: _publish(agent_id),
            metadata={"source": "example"},
        )
    except ConnectionError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@app.get("/agents/{agent_id}/generate")
async def generate(agent_id: str, actor_id: str = "") -> dict[str, str]:
    """Generate a creation; slow enough to show up in avg duration."""

    async def work() -> dict[str, str]:
        app_logger.info(
            "Generating", extra={"operation": "generate", "agent_id": agent_id}
        )
        await asyncio.sleep(0.5)
        return {"agent_id": agent_id, "status": "generated"}

    return await obs.track("generate", agent_id, actor_id, work)

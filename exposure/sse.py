from __future__ import annotations
import asyncio
import json
import logging
from typing import Any, AsyncIterator

logger = logging.getLogger(__name__)


def sse_event(event: str, data: Any) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


async def sse_stream(
    queue: "asyncio.Queue[dict]",
    task: "asyncio.Future[Any]",
    poll_interval: float = 0.5,
) -> AsyncIterator[str]:
    """진행 이벤트를 흘려보내다가 작업이 끝나면 result 이벤트 1개로 마무리."""
    while True:
        try:
            msg = await asyncio.wait_for(queue.get(), timeout=poll_interval)
            yield sse_event("progress", msg)
            if msg.get("stage") == "done":
                break
        except asyncio.TimeoutError:
            if task.done():
                # 큐에 남은 것 모두 처리
                while not queue.empty():
                    yield sse_event("progress", queue.get_nowait())
                break
            yield sse_event("progress", {"stage": "waiting", "current": 0, "total": 0, "message": "처리 중..."})

    try:
        result = await task
        yield sse_event("result", result)
    except Exception as e:
        logger.exception("스트리밍 분석 실패")
        yield sse_event("result", {"error": str(e)})

"""Mock OpenAI-compatible language model for local development.

Set MOCK_ADVISOR_FAILURE (e.g. "rate_limit_exceeded" or "insufficient_quota")
to make every completion fail with a 429 carrying that error code.
"""

import os
import time

from fastapi import FastAPI
from fastapi.responses import JSONResponse

app = FastAPI(title="Mock Advisor Model", version="1.0.0")


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/v1/models")
def list_models():
    return {"object": "list", "data": [{"id": "llama-3.1-70b-versatile", "object": "model"}]}


@app.post("/v1/chat/completions")
def chat_completions(body: dict):
    failure = os.environ.get("MOCK_ADVISOR_FAILURE")
    if failure:
        return JSONResponse(status_code=429, content={"error": {"message": failure, "code": failure}})

    last_user = next((m["content"] for m in reversed(body.get("messages", [])) if m["role"] == "user"), "")
    return {
        "id": f"chatcmpl-{int(time.time())}",
        "object": "chat.completion",
        "model": body.get("model"),
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": f"Mock advice for: {last_user[:200]}"},
                "finish_reason": "stop",
            }
        ],
    }

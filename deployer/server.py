from fastapi import FastAPI, HTTPException, BackgroundTasks
from fastapi.responses import RedirectResponse, PlainTextResponse
from functools import lru_cache
from .log import log
from .models import TaskRequest, TaskResponse
from .pipeline import Pipeline, default_pipeline
from .security import AuthorizationError, authorize
from .settings import settings
import pathlib

app = FastAPI(title="LLM Pages Deployer")

@lru_cache(maxsize=1)
def get_pipeline() -> Pipeline:
    # built once; clients inside are shared by every background run
    return default_pipeline()

# Landing + health endpoints
@app.get("/", include_in_schema=False)
async def root_redirect():
    return RedirectResponse(url="/docs")

@app.get("/healthz")
async def healthz():
    return {"status": "healthy"}

# ---- MAIN ENDPOINT ----
@app.post("/task", response_model=TaskResponse)
@app.post("/api/build", response_model=TaskResponse, include_in_schema=False)
async def receive_task(req: TaskRequest, background_tasks: BackgroundTasks):
    # 1️⃣ Verify secret first
    try:
        authorize(req.secret)
    except AuthorizationError:
        log("intake", f"rejected task {req.task} r{req.round}: bad secret")
        raise HTTPException(status_code=403, detail="Invalid secret")

    # 2️⃣ Anything failing before the ack is the caller's only visible error
    try:
        pipeline = get_pipeline()
    except Exception as e:
        log("intake", f"cannot start pipeline: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    # 3️⃣ Build + publish + notify after the response has been sent
    background_tasks.add_task(pipeline.run, req)
    log("intake", f"accepted task {req.task} r{req.round} nonce={req.nonce}")
    return TaskResponse(status="ok", message="Request received, processing...")

# ---- LOG VIEWER ----
@app.get("/_log", include_in_schema=False)
async def _log():
    path = pathlib.Path(settings.LOG_PATH)
    if not path.exists():
        return PlainTextResponse(f"NO LOG: {path} not found\n")
    try:
        return PlainTextResponse(path.read_text(encoding="utf-8"))
    except OSError as e:
        return PlainTextResponse(f"ERROR reading log: {e}\n")

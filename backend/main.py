import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stumanage.core.config import get_settings
from stumanage.core.database import init_db
from stumanage.core.exceptions import CascadeError
from stumanage.api import cascade

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# 创建数据库表
init_db()
logger.info("[Startup] 数据表创建/确认完成")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"]
)


@app.exception_handler(CascadeError)
async def cascade_error_handler(request: Request, exc: CascadeError):
    logger.warning(f"Cascade error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message}
    )


# 注册路由
app.include_router(cascade.router, prefix=f"{settings.API_V1_STR}/cascade")

@app.get("/")
async def root():
    return {
        "message": "Welcome to Student Management Cascade API",
        "docs": "/docs",
        "status": "running"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

# main.py
import logging
import os
from dotenv import load_dotenv
# 환경 변수를 라우터 임포트 전에 로드해야 DATABASE_URL / SECRET_KEY가 적용됨
load_dotenv()
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from db import init_db
from routers import routers
from utils.errors import register_exception_handlers
from utils.route_guard import route_guard

import uvicorn


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="NoteShare")

cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(route_guard)
register_exception_handlers(app)

# 라우터 등록
for router in routers:
    app.include_router(router)


@app.get("/")
def root():
    return {"message": "NoteShare API"}

# 앱 시작 시(uvicorn main:app) 한 번만 테이블 생성
init_db()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=True)

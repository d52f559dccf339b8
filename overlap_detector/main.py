from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from overlap_detector.config import CORS_ORIGINS
from overlap_detector.logger import logger
from overlap_detector.routers.plagiarism import router as plagiarism_router
from overlap_detector.utils.source_index import corpus_index

app = FastAPI(title="Overlap Detector")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plagiarism_router)
logger.info("Overlap detector API initialised")


@app.get("/health")
def health():
    return {"status": "ok", "sources": len(corpus_index.get())}

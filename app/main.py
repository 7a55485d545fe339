from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.logger import logger
from app.routers.snippets.plagiarism import router as snippets_plagiarism_router

app = FastAPI(title="Snippet Plagiarism API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(snippets_plagiarism_router)


@app.get("/")
def read_root():
    return {"status": "Snippet Plagiarism API is running"}


logger.info("Snippet Plagiarism API initialized")

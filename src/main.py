import logging

from fastapi import FastAPI

import config
from logging_config import setup_logging
from americano.router import router as americano_router

setup_logging(getattr(logging, config.LOG_LEVEL, logging.INFO))

app = FastAPI(title="Padel Americano")
app.include_router(americano_router)

@app.get("/")
async def root():
    return {
        "message": "Padel Americano scheduler",
        "endpoints": {
            "sessions": "/americano/sessions",
            "next_round": "/americano/sessions/{id}/rounds",
            "score": "/americano/sessions/{id}/matches/{match_id}/score",
        },
    }

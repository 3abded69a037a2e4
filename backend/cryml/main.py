from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cryml import config
from cryml.api.routes import router

app = FastAPI(
    title="cryml Diagram Validator",
    version="0.1.0",
)

# Middleware first
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes after middleware
app.include_router(router)

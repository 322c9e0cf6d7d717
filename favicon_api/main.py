from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from favicon_api.config import LOG_FORMAT, LOG_LEVEL
from favicon_api.routes import favicon
import logging

app = FastAPI(title="Favicon Resolver")

# Setup logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(favicon.router)


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Favicon Resolver API!"}


# Log requests and responses
@app.middleware("http")
async def log_requests(request, call_next):
    logger.info(f"Request: {request.method} {request.url}")
    response = await call_next(request)
    logger.info(f"Response: {response.status_code}")
    return response

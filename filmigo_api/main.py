"""
Filmigo API: a small HTTP gateway over IMDb, OMDb and JustWatch clients.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from .clients.imdb_client import ImdbClient
from .clients.movie_client import MovieClients, build_clients
from .clients.omdb_client import OmdbClient
from .config import Settings, configure_logging, settings
from .schemas.movies_schemas import (
    ErrorResponse,
    HealthResponse,
    MovieResponse,
    OmdbMovieResponse,
    SearchResponse,
    ServiceInfo,
)
from .utils.utils_clients import MovieClientError

logger = logging.getLogger(__name__)
access_logger = logging.getLogger('filmigo_api.access')

SERVICE_NAME = 'filmigo-api'
VERSION = '1.0.0'
API_PREFIX = '/api/v1'
EXAMPLE_ID = 'tt0111161'
EXAMPLE_SEARCH = f'{API_PREFIX}/movies/search?q=inception'
OMDB_UNAVAILABLE = 'OMDB service unavailable. API key not configured.'

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, PUT, DELETE, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
}

SERVICE_INFO = {
    'message': '🎬 Welcome to Filmigo API',
    'version': VERSION,
    'description': 'A powerful REST API for movie data',
    'endpoints': {
        'health': f'GET {API_PREFIX}/health',
        'movie_by_id': f'GET {API_PREFIX}/movies/{{imdb_id}}',
        'search': f'GET {API_PREFIX}/movies/search?q={{query}}',
        'omdb_movie': f'GET {API_PREFIX}/omdb/{{imdb_id}}',
    },
    'examples': {
        'get_movie': f'{API_PREFIX}/movies/{EXAMPLE_ID}',
        'search_movies': EXAMPLE_SEARCH,
        'omdb_data': f'{API_PREFIX}/omdb/{EXAMPLE_ID}',
        'health_check': f'{API_PREFIX}/health',
    },
}

ERROR_RESPONSES = {
    400: {'model': ErrorResponse},
    404: {'model': ErrorResponse},
    500: {'model': ErrorResponse},
    503: {'model': ErrorResponse},
}

router = APIRouter()
api_router = APIRouter(prefix=API_PREFIX, responses=ERROR_RESPONSES)


def error_response(status_code: int, error: str, **context: Any) -> JSONResponse:
    body = ErrorResponse(error=error, **context)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def get_clients(request: Request) -> MovieClients:
    return request.app.state.clients


def get_imdb_client(clients: MovieClients = Depends(get_clients)) -> ImdbClient:
    return clients.imdb


def get_omdb_client(clients: MovieClients = Depends(get_clients)) -> Optional[OmdbClient]:
    return clients.omdb


async def cors_middleware(request: Request, call_next):
    """
    Permissive CORS. Also turns unhandled exceptions into a JSON 500 so the
    error response still carries CORS headers and reaches the access log.
    """
    if request.method == 'OPTIONS':
        return Response(status_code=204, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error("Unhandled exception on %s %s: %s",
                     request.method, request.url.path, exc, exc_info=exc)
        response = error_response(500, 'Internal server error')
    response.headers.update(CORS_HEADERS)
    return response


async def access_log_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    access_logger.info(
        "%s %s %d %.3fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@router.get('/', response_model=ServiceInfo)
async def root():
    return SERVICE_INFO


@api_router.get('/health', response_model=HealthResponse)
async def health_check():
    return {
        'status': 'OK',
        'service': SERVICE_NAME,
        'version': VERSION,
        'message': 'Filmigo API is running successfully!',
    }


# literal path first so 'search' is never taken as an id
@api_router.get('/movies/search', response_model=SearchResponse)
async def search_movies(
    q: Optional[str] = None,
    omdb: Optional[OmdbClient] = Depends(get_omdb_client)
):
    if not q:
        return error_response(
            400, "Query parameter 'q' is required", example=EXAMPLE_SEARCH)
    if omdb is None:
        return error_response(503, OMDB_UNAVAILABLE)
    try:
        results = await omdb.search(q)
    except MovieClientError as e:
        logger.warning("Search for %r failed: %s", q, e)
        return error_response(500, 'Search failed', query=q)
    return {'success': True, 'query': q, 'results': results}


@api_router.get('/movies/{id}', response_model=MovieResponse)
async def get_movie_by_id(id: str, imdb: ImdbClient = Depends(get_imdb_client)):
    if not id.startswith('tt'):
        return error_response(
            400, "Invalid IMDB ID format. Must start with 'tt'", example=EXAMPLE_ID)
    try:
        movie = await imdb.get_movie(id)
    except MovieClientError as e:
        logger.warning("IMDb lookup for %s failed: %s", id, e)
        return error_response(404, 'Movie not found', id=id)
    return {'success': True, 'data': movie}


@api_router.get('/omdb/{id}', response_model=OmdbMovieResponse)
async def get_omdb_movie(id: str, omdb: Optional[OmdbClient] = Depends(get_omdb_client)):
    if omdb is None:
        return error_response(503, OMDB_UNAVAILABLE)
    try:
        movie = await omdb.get_movie(id)
    except MovieClientError as e:
        logger.warning("OMDb lookup for %s failed: %s", id, e)
        return error_response(404, 'Movie not found in OMDB', id=id)
    return {'success': True, 'source': 'omdb', 'data': movie}


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.settings
    logger.info("🎬 Filmigo API starting on port %s", config.PORT)
    logger.info("📋 Health check endpoint: %s/health", API_PREFIX)
    logger.info("OMDb backend %s",
                "enabled" if app.state.clients.omdb else "disabled")
    yield
    logger.info("Filmigo API shutting down")


def create_app(
    config: Optional[Settings] = None,
    clients: Optional[MovieClients] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    :param config: Settings to use, defaults to the environment-loaded ones.
    :param clients: Backend handles to inject; built from settings when omitted.
    :return: Configured FastAPI app.
    """
    config = config or settings
    configure_logging(config.LOG_LEVEL)

    release = config.is_release
    app = FastAPI(
        title='Filmigo API',
        description='A powerful REST API for movie data',
        version=VERSION,
        docs_url=None if release else '/docs',
        redoc_url=None if release else '/redoc',
        openapi_url=None if release else '/openapi.json',
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.clients = clients or build_clients(config)

    # the last middleware added runs outermost
    app.middleware('http')(cors_middleware)
    app.middleware('http')(access_log_middleware)

    app.include_router(router)
    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False
    )


if __name__ == '__main__':
    run()

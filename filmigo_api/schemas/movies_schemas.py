from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    message: str


class ServiceInfo(BaseModel):
    message: str
    version: str
    description: str
    endpoints: Dict[str, str]
    examples: Dict[str, str]


class MovieResponse(BaseModel):
    success: bool = True
    data: Any


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    results: List[Any]


class OmdbMovieResponse(BaseModel):
    success: bool = True
    source: Literal['omdb'] = 'omdb'
    data: Any


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    id: Optional[str] = None
    query: Optional[str] = None
    example: Optional[str] = None

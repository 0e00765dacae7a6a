"""FastAPI application exposing testgen operations in service mode."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..build import build_result
from ..errors import TestGenError
from ..merge import merge_generated, missing_directives
from ..parsing import extract_unit_info
from ..paths import PathResolver


class ScanRequest(BaseModel):
    content: str


class ScanResponse(BaseModel):
    found: bool
    unit: Optional[Dict[str, Any]] = None


class ResolveRequest(BaseModel):
    path: str
    override: Optional[str] = None


class ResolveResponse(BaseModel):
    test_path: str
    namespace: str
    name: str
    is_counterpart: bool


class MergeRequest(BaseModel):
    existing: str
    fragment: str


class MergeResponse(BaseModel):
    content: str
    added_imports: List[str]


class ClassifyRequest(BaseModel):
    output: str
    tool: Optional[str] = None


class ClassifyResponse(BaseModel):
    passed: bool
    summary: str
    tool: str


class HealthResponse(BaseModel):
    status: str


def create_app(resolver: PathResolver | None = None) -> FastAPI:
    """Create the FastAPI application exposing scan, resolve, merge and classify."""
    path_resolver = resolver or PathResolver()
    app = FastAPI(title="TestGen Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan(payload: ScanRequest) -> ScanResponse:
        info = extract_unit_info(payload.content)
        if info is None:
            return ScanResponse(found=False)
        return ScanResponse(found=True, unit=asdict(info))

    @app.post("/resolve", response_model=ResolveResponse)
    async def resolve(payload: ResolveRequest) -> ResolveResponse:
        location = path_resolver.parse_location(payload.path)
        return ResolveResponse(
            test_path=path_resolver.resolve_counterpart_path(payload.path, payload.override),
            namespace=location.namespace,
            name=location.name,
            is_counterpart=location.is_counterpart,
        )

    @app.post("/merge", response_model=MergeResponse)
    async def merge(payload: MergeRequest) -> MergeResponse:
        added = missing_directives(payload.existing, payload.fragment)
        return MergeResponse(
            content=merge_generated(payload.existing, payload.fragment),
            added_imports=list(added),
        )

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(payload: ClassifyRequest) -> ClassifyResponse:
        result = build_result(payload.output, payload.tool)
        return ClassifyResponse(
            passed=result.passed,
            summary=result.summary,
            tool=result.tool or "unknown",
        )

    @app.exception_handler(TestGenError)
    async def testgen_error_handler(
        _: Any, exc: TestGenError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)

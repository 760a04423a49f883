# src/admin/api.py

import secrets
from fastapi import FastAPI, HTTPException, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
import uvicorn

from src.admin.service import INVALID_INPUT, MappingAdmin

ERROR_STATUS = {
    "DuplicateMappingError": 409,
    "MappingNotFoundError": 404,
    INVALID_INPUT: 422,
}


# --- Pydantic Models for Data Validation ---
class MappingRequest(BaseModel):
    telegram: str
    slack: str


class MappingResponse(BaseModel):
    telegram: str
    slack: str


class ResultResponse(BaseModel):
    ok: bool
    message: str


def create_admin_app(admin: MappingAdmin, api_token: str) -> FastAPI:
    """Builds the HTTP admin API for channel mappings, guarded by a static bearer token."""
    if not api_token:
        raise ValueError("An admin API token is required.")

    app = FastAPI(title="Relay Bridge Admin API")
    bearer_scheme = HTTPBearer()

    # --- Authentication Dependency ---
    async def require_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
        if not secrets.compare_digest(credentials.credentials, api_token):
            raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    def _raise_for(result):
        if not result.ok:
            raise HTTPException(status_code=ERROR_STATUS.get(result.error, 400), detail={"error": result.error, "message": result.message})

    # --- API Endpoints ---
    @app.get("/mappings", response_model=list[MappingResponse], dependencies=[Depends(require_token)])
    def list_mappings():
        return admin.list()

    @app.post("/mappings", status_code=201, response_model=ResultResponse, dependencies=[Depends(require_token)])
    def add_mapping(request: MappingRequest):
        result = admin.add(request.telegram, request.slack)
        _raise_for(result)
        return ResultResponse(ok=True, message=result.message)

    @app.delete("/mappings", response_model=ResultResponse, dependencies=[Depends(require_token)])
    def remove_mapping(request: MappingRequest):
        result = admin.remove(request.telegram, request.slack)
        _raise_for(result)
        return ResultResponse(ok=True, message=result.message)

    return app


def create_admin_server(app: FastAPI, host: str, port: int) -> uvicorn.Server:
    """A uvicorn server that can be awaited inside the main task group."""
    config = uvicorn.Config(app, host=host, port=port, log_level="info")
    return uvicorn.Server(config)

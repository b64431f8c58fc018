from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from restaurante.core.exceptions import DomainError
from restaurante.utils.logger import logger


async def domain_exception_handler(request: Request, exc: DomainError):
    logger.info(f"[Erro de domínio] {exc.codigo} em {request.method} {request.url.path}: {exc.mensagem}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"[Validação] {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors()), "codigo": "VALIDACAO"},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[Erro inesperado] {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Erro interno do servidor"})

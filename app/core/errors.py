from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

GENERIC_ERROR_DETAIL = 'Internal server error'


async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.opt(exception=exc).error(
        'persistence_failure',
        method=request.method,
        path=request.url.path,
        error=exc.__class__.__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'detail': GENERIC_ERROR_DETAIL},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)

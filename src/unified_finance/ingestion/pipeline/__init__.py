from .error_handlers import (
    BODY_PREVIEW_LIMIT,
    ErrorMapperChain,
    create_error_mapper_chain,
    create_fred_error_mapper_chain,
)
from .request_pipeline import RequestPipeline

__all__ = [
    "BODY_PREVIEW_LIMIT",
    "ErrorMapperChain",
    "RequestPipeline",
    "create_error_mapper_chain",
    "create_fred_error_mapper_chain",
]

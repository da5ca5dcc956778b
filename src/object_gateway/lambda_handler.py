"""AWS Lambda entry point: the gateway app behind API Gateway, adapted by Mangum."""
import logging

from mangum import Mangum

from object_gateway.main import create_app
from object_gateway.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_handler(settings: Settings | None = None, s3_client=None) -> Mangum:
    """
    Build the Lambda handler for the gateway.

    Mangum hands the app an already-decoded path without a ``raw_path``; object keys
    are derived from that path, minus ``api_gateway_base_path`` (e.g. a stage name).
    """
    settings = settings or get_settings()
    app = create_app(settings=settings, s3_client=s3_client)
    logger.info(f"Lambda handler mounted under '{settings.api_gateway_base_path}'")
    # Lambda invocations are one-shot, no startup/shutdown events to run
    return Mangum(app, lifespan="off", api_gateway_base_path=settings.api_gateway_base_path)


handler = create_handler()

# the name the Lambda function configuration points at
lambda_handler = handler

# cli.py
import logging

import click
from botocore.exceptions import ClientError

from object_gateway.s3.client import create_s3_client
from object_gateway.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """CLI commands for running and configuring the Object Gateway"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  App Name: {settings.app_name}")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Listen: {settings.host}:{settings.port}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
def create_bucket():
    """Create the configured bucket if it does not exist yet"""
    settings = get_settings()
    s3_client = create_s3_client(settings)
    create_kwargs = {"Bucket": settings.s3_bucket_name}
    # us-east-1 rejects an explicit location constraint
    if settings.aws_region != "us-east-1":
        create_kwargs["CreateBucketConfiguration"] = {"LocationConstraint": settings.aws_region}

    try:
        s3_client.create_bucket(**create_kwargs)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code")
        if code not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
            raise click.ClickException(f"Failed to create bucket {settings.s3_bucket_name}: {e}")
        click.echo(f"Bucket {settings.s3_bucket_name} already exists")
        return
    click.echo(f"Created bucket {settings.s3_bucket_name}")


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to HOST setting)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to PORT setting)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the gateway with uvicorn"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "object_gateway.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()

"""Process entry point.

Configures logging and tracing, then builds the provider from the
environment. ``DBT_CLOUD_ACCOUNT_ID`` and ``DBT_CLOUD_TOKEN`` must be set
(or present in ``.env``) before import, otherwise importing raises
``PermanentError``.

Use from a driver script or an interactive session::

    DBT_CLOUD_ACCOUNT_ID=1234 DBT_CLOUD_TOKEN=... python -i -m dbtcloud.main
    >>> repositories = provider.resource("dbtcloud_repository")
    >>> import asyncio
    >>> asyncio.run(repositories.import_state("10:55"))
"""

from dbtcloud.config.telemetry import configure_telemetry

configure_telemetry()

from dbtcloud.provider import Provider  # noqa: E402

provider = Provider.from_settings()

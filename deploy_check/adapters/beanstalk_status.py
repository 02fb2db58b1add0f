"""Elastic Beanstalk status query adapters backed by boto3."""

from __future__ import annotations

from typing import Any, Callable, Final

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    HTTPClientError,
    InvalidRegionError,
    NoCredentialsError,
    PartialCredentialsError,
)

from deploy_check.domain import ApplicationVersionSnapshot, DeployTarget, EnvironmentSnapshot

from .beanstalk_error_codes import BeanstalkErrorCategory, beanstalk_error_category
from .beanstalk_errors import (
    BeanstalkAuthorizationError,
    BeanstalkConnectionError,
    BeanstalkCredentialsError,
    BeanstalkQueryError,
    BeanstalkRequestError,
    BeanstalkResponseError,
    BeanstalkThrottledError,
)
from .interfaces import StatusQueryPort

_USER_AGENT_EXTRA: Final[str] = "beanstalk-deploy-check/1.0"


def adapter_create_beanstalk_client(
    region: str,
    access_key: str | None = None,
    secret_key: str | None = None,
    request_timeout_seconds: float = 30.0,
):
    """Create an Elastic Beanstalk client with static or ambient credentials.

    Static credentials are used only when both key and secret are supplied;
    otherwise boto3 resolves credentials through its default provider chain
    (environment, shared config, instance profile, task role).

    Args:
        region: AWS region name.
        access_key: Optional static access key id.
        secret_key: Optional static secret access key.
        request_timeout_seconds: Connect and read timeout per request.

    Returns:
        botocore.client.BaseClient: Elastic Beanstalk client.

    Raises:
        ValueError: Raised when region is blank or malformed, or timeout is not positive.
    """

    normalized_region = region.strip()
    if not normalized_region:
        raise ValueError("region must not be blank")
    if request_timeout_seconds <= 0:
        raise ValueError("request_timeout_seconds must be > 0")

    if access_key and secret_key:
        session = boto3.session.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=normalized_region,
        )
    else:
        session = boto3.session.Session(region_name=normalized_region)

    client_config = Config(
        connect_timeout=request_timeout_seconds,
        read_timeout=request_timeout_seconds,
        retries={"total_max_attempts": 1, "mode": "standard"},
        user_agent_extra=_USER_AGENT_EXTRA,
    )
    try:
        return session.client("elasticbeanstalk", config=client_config)
    except InvalidRegionError as error:
        raise ValueError(f"region {normalized_region} is not a valid AWS region name") from error


class _BeanstalkStatusAdapterBase:
    """Shared paginated call and error mapping helpers for Beanstalk adapters."""

    def __init__(self, client: Any):
        """Initialize adapter with a boto3 Elastic Beanstalk client.

        Args:
            client: boto3 `elasticbeanstalk` client or compatible stub.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when client is missing.
        """

        if client is None:
            raise ValueError("client must not be None")
        self._client = client

    def _adapter_fetch_all_pages(
        self,
        operation: Callable[..., dict[str, Any]],
        request_parameters: dict[str, Any],
        list_key: str,
    ) -> list[dict[str, Any]]:
        """Invoke one describe operation and follow `NextToken` pages.

        Args:
            operation: Bound client operation.
            request_parameters: Base request parameters.
            list_key: Response key holding the item list.

        Returns:
            list[dict[str, Any]]: Items from every page in upstream order.

        Raises:
            BeanstalkQueryError: Raised on call failure or malformed response.
        """

        items: list[dict[str, Any]] = []
        page_request = dict(request_parameters)
        seen_tokens: set[str] = set()

        while True:
            response = self._adapter_invoke(operation=operation, request_parameters=page_request)
            page_items = response.get(list_key) if isinstance(response, dict) else None
            if not isinstance(page_items, list):
                raise BeanstalkResponseError(f"Beanstalk response missing list field {list_key}")
            for page_item in page_items:
                if not isinstance(page_item, dict):
                    raise BeanstalkResponseError(f"Beanstalk response field {list_key} contains a non-object item")
                items.append(page_item)

            next_token = response.get("NextToken")
            if not next_token:
                return items
            if next_token in seen_tokens:
                raise BeanstalkResponseError("Beanstalk response repeated pagination token")
            seen_tokens.add(next_token)
            page_request = {**request_parameters, "NextToken": next_token}

    def _adapter_invoke(
        self,
        operation: Callable[..., dict[str, Any]],
        request_parameters: dict[str, Any],
    ) -> dict[str, Any]:
        """Execute one client call and map botocore failures to adapter errors.

        Args:
            operation: Bound client operation.
            request_parameters: Request keyword arguments.

        Returns:
            dict[str, Any]: Raw response payload.

        Raises:
            BeanstalkQueryError: Raised for every botocore failure.
        """

        try:
            return operation(**request_parameters)
        except ClientError as error:
            raise self._adapter_map_client_error(error) from error
        except (NoCredentialsError, PartialCredentialsError) as error:
            raise BeanstalkCredentialsError(f"Beanstalk credentials unavailable: {error}") from error
        except (BotoConnectionError, HTTPClientError) as error:
            raise BeanstalkConnectionError(f"Beanstalk transport request failed: {error}") from error
        except BotoCoreError as error:
            raise BeanstalkQueryError(f"Beanstalk client failure: {error}") from error

    def _adapter_map_client_error(self, error: ClientError) -> BeanstalkQueryError:
        """Map one botocore `ClientError` to the adapter exception hierarchy.

        Args:
            error: botocore client error.

        Returns:
            BeanstalkQueryError: Typed adapter exception, not yet raised.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        error_payload = error.response.get("Error", {}) if isinstance(error.response, dict) else {}
        error_code = str(error_payload.get("Code") or "UNKNOWN")
        error_message = str(error_payload.get("Message") or "unexpected upstream response")
        message = f"Beanstalk request rejected: code={error_code}, message={error_message}"

        category = beanstalk_error_category(error_code)
        if category is BeanstalkErrorCategory.AUTHORIZATION:
            return BeanstalkAuthorizationError(message, error_code=error_code)
        if category is BeanstalkErrorCategory.THROTTLED:
            return BeanstalkThrottledError(message, error_code=error_code)
        return BeanstalkRequestError(message, error_code=error_code)


def _adapter_text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


class BeanstalkEnvironmentStatusAdapter(_BeanstalkStatusAdapterBase, StatusQueryPort):
    """Status query over `DescribeEnvironments` for environment-status polling."""

    def adapter_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return "elasticbeanstalk_describe_environments"

    def adapter_fetch_snapshots(self, target: DeployTarget) -> tuple[EnvironmentSnapshot, ...]:
        """Fetch live environments of the target application.

        Args:
            target: Deploy target; a non-empty selector narrows the query to one environment.

        Returns:
            tuple[EnvironmentSnapshot, ...]: Environment snapshots in upstream order.

        Raises:
            BeanstalkQueryError: Raised on call failure or malformed response.
        """

        request_parameters: dict[str, Any] = {
            "ApplicationName": target.application,
            "IncludeDeleted": False,
        }
        if target.environment_selector:
            request_parameters["EnvironmentNames"] = [target.environment_selector]

        environments = self._adapter_fetch_all_pages(
            operation=self._client.describe_environments,
            request_parameters=request_parameters,
            list_key="Environments",
        )
        return tuple(
            EnvironmentSnapshot(
                environment_name=_adapter_text(environment, "EnvironmentName"),
                version_label=_adapter_text(environment, "VersionLabel"),
                lifecycle_status=_adapter_text(environment, "Status"),
                health_status=_adapter_text(environment, "Health"),
            )
            for environment in environments
        )


class BeanstalkApplicationVersionAdapter(_BeanstalkStatusAdapterBase, StatusQueryPort):
    """Status query over `DescribeApplicationVersions` for version polling."""

    def adapter_source_name(self) -> str:
        """Return stable adapter source label.

        Returns:
            str: Source identifier.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return "elasticbeanstalk_describe_application_versions"

    def adapter_fetch_snapshots(self, target: DeployTarget) -> tuple[ApplicationVersionSnapshot, ...]:
        """Fetch the expected application version description.

        Args:
            target: Deploy target carrying the expected version label.

        Returns:
            tuple[ApplicationVersionSnapshot, ...]: Version snapshots in upstream order.

        Raises:
            BeanstalkQueryError: Raised on call failure or malformed response.
        """

        versions = self._adapter_fetch_all_pages(
            operation=self._client.describe_application_versions,
            request_parameters={
                "ApplicationName": target.application,
                "VersionLabels": [target.expected_version_label],
            },
            list_key="ApplicationVersions",
        )
        return tuple(
            ApplicationVersionSnapshot(
                application_name=_adapter_text(version, "ApplicationName"),
                version_label=_adapter_text(version, "VersionLabel"),
                processing_status=_adapter_text(version, "Status"),
            )
            for version in versions
        )

"""Adapter layer package for Elastic Beanstalk integration boundaries."""

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
from .beanstalk_status import (
	BeanstalkApplicationVersionAdapter,
	BeanstalkEnvironmentStatusAdapter,
	adapter_create_beanstalk_client,
)
from .interfaces import StatusQueryPort

__all__ = [
	"BeanstalkApplicationVersionAdapter",
	"BeanstalkAuthorizationError",
	"BeanstalkConnectionError",
	"BeanstalkCredentialsError",
	"BeanstalkEnvironmentStatusAdapter",
	"BeanstalkErrorCategory",
	"BeanstalkQueryError",
	"BeanstalkRequestError",
	"BeanstalkResponseError",
	"BeanstalkThrottledError",
	"StatusQueryPort",
	"adapter_create_beanstalk_client",
	"beanstalk_error_category",
]

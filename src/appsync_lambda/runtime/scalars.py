"""
Python types for GraphQL and AWS AppSync scalars.

AppSync already validates scalar formats before invoking the resolver, so
these are thin ``str``/``int`` subclasses that keep the declared scalar
visible in generated signatures. ``AWSJSON`` is the exception: resolvers
receive it already parsed, so it is any JSON value.
"""

from typing import Any, Dict


class ID(str):
    """GraphQL ``ID`` scalar."""


class AWSDate(str):
    """ISO 8601 date (``YYYY-MM-DD``)."""


class AWSDateTime(str):
    """ISO 8601 date and time."""


class AWSTime(str):
    """ISO 8601 time."""


class AWSEmail(str):
    """Email address."""


class AWSURL(str):
    """URL."""


class AWSPhone(str):
    """Phone number."""


class AWSIPAddress(str):
    """IPv4 or IPv6 address."""


class AWSTimestamp(int):
    """Seconds since the Unix epoch."""


# Parsed JSON value (object, array or scalar), passed through unchanged
AWSJSON = Any


# GraphQL scalar name -> Python type
SCALARS: Dict[str, Any] = {
    "ID": ID,
    "String": str,
    "Int": int,
    "Float": float,
    "Boolean": bool,
    "AWSDate": AWSDate,
    "AWSDateTime": AWSDateTime,
    "AWSTime": AWSTime,
    "AWSTimestamp": AWSTimestamp,
    "AWSEmail": AWSEmail,
    "AWSJSON": AWSJSON,
    "AWSURL": AWSURL,
    "AWSPhone": AWSPhone,
    "AWSIPAddress": AWSIPAddress,
}

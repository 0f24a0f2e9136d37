"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from hashlib import sha256
import hmac
import re

from ._http import SIGV4_TIMESTAMP_FORMAT, SigningRequest
from ._identity import AWSCredentials
from .exceptions import (
    InvalidTimestampException,
    MalformedRequestException,
    MissingCredentialFieldException,
    MissingExpectedParameterException,
)

ALGORITHM: str = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR: str = "aws4_request"
AMZ_DATE_HEADER: str = "x-amz-date"
DEFAULT_CONTENT_TYPE: str = "application/x-www-form-urlencoded; charset=utf-8"
EMPTY_SHA256_HASH = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Canonical header order; SIGNED_HEADERS is derived from it.
SIGNING_HEADERS: tuple[str, ...] = ("content-type", "host", AMZ_DATE_HEADER)
SIGNED_HEADERS: str = ";".join(SIGNING_HEADERS)
AMZ_DATE_RE = re.compile(r"[0-9]{8}T[0-9]{6}Z")


@dataclass(frozen=True)
class SigningKeyLadder:
    """The four raw HMAC-SHA256 outputs narrowing a secret key to one scope."""

    k_date: bytes
    k_region: bytes
    k_service: bytes
    k_signing: bytes


class CanonicalRequestBuilder:
    """Serializes a request into the canonical form hashed by SigV4.

    The signed header set is fixed to ``content-type``, ``host`` and
    ``x-amz-date``. Paths and query components are used exactly as given, so
    callers must URI-encode them beforehand.
    """

    def build(
        self,
        *,
        method: str,
        path: str,
        query_pairs: Iterable[tuple[str, str]],
        host: str,
        content_type: str,
        amz_date: str,
        body: bytes,
    ) -> str:
        self._validate_required(host=host, content_type=content_type, amz_date=amz_date)
        canonical_path = self._format_canonical_path(path=path)
        canonical_query = self._format_canonical_query(query_pairs=query_pairs)
        canonical_fields = self._format_canonical_fields(
            fields={
                "content-type": content_type,
                "host": host,
                AMZ_DATE_HEADER: amz_date,
            }
        )
        canonical_payload = self._format_canonical_payload(body=body)
        return (
            f"{method.upper()}\n"
            f"{canonical_path}\n"
            f"{canonical_query}\n"
            f"{canonical_fields}\n"
            f"{SIGNED_HEADERS}\n"
            f"{canonical_payload}"
        )

    def build_from_request(self, *, request: SigningRequest) -> str:
        return self.build(
            method=request.method,
            path=request.path,
            query_pairs=request.query_pairs,
            host=request.host,
            content_type=request.content_type,
            amz_date=request.amz_date,
            body=request.body,
        )

    def _validate_required(
        self, *, host: str, content_type: str, amz_date: str
    ) -> None:
        missing = [
            name
            for name, value in (
                ("host", host),
                ("content-type", content_type),
                (AMZ_DATE_HEADER, amz_date),
            )
            if not value
        ]
        if missing:
            raise MissingExpectedParameterException(
                f"Cannot sign a request without values for: {', '.join(missing)}."
            )

    def _format_canonical_path(self, *, path: str) -> str:
        if not path.startswith("/"):
            raise MalformedRequestException(
                f"Request path must start with '/'. Received: {path!r}"
            )
        return path

    def _format_canonical_query(self, *, query_pairs: Iterable[tuple[str, str]]) -> str:
        # Sorting on the whole pair keeps repeated keys in a stable order.
        return "&".join(f"{key}={value}" for key, value in sorted(query_pairs))

    def _format_canonical_fields(self, *, fields: dict[str, str]) -> str:
        return "".join(f"{name}:{fields[name]}\n" for name in SIGNING_HEADERS)

    def _format_canonical_payload(self, *, body: bytes) -> str:
        if not body:
            return EMPTY_SHA256_HASH
        return sha256(body).hexdigest()


class SigV4Signer:
    """
    Request signer for applying the AWS Signature Version 4 algorithm.

    The signer holds no per-request state and never reads the clock, so one
    instance can be shared freely between threads.
    """

    def __init__(self, *, builder: CanonicalRequestBuilder | None = None):
        self._builder = builder if builder is not None else CanonicalRequestBuilder()

    def sign(
        self,
        *,
        request: SigningRequest,
        credentials: AWSCredentials,
        service: str,
    ) -> str:
        """Compute the ``Authorization`` header value for ``request``.

        The request is only read. Attaching the returned value is left to the
        caller.
        """
        self._validate_credentials(credentials=credentials)
        date = self._signing_date(amz_date=request.amz_date)

        canonical_request = self.canonical_request(request=request)
        credential_scope = self.credential_scope(
            date=date, region=credentials.region, service=service
        )
        string_to_sign = self.string_to_sign(
            canonical_request=canonical_request,
            amz_date=request.amz_date,
            credential_scope=credential_scope,
        )
        signature = self._signature(
            string_to_sign=string_to_sign,
            secret_key=credentials.secret_key,
            date=date,
            region=credentials.region,
            service=service,
        )
        return self.generate_authorization_header(
            access_key=credentials.access_key,
            credential_scope=credential_scope,
            signature=signature,
        )

    def signed_headers(
        self,
        *,
        request: SigningRequest,
        credentials: AWSCredentials,
        service: str,
    ) -> dict[str, str]:
        """Every header the signature covers, plus ``Authorization``.

        Useful when the outgoing request hasn't had ``Host``, ``Content-Type`` and
        ``X-Amz-Date`` set yet.
        """
        authorization = self.sign(
            request=request, credentials=credentials, service=service
        )
        return {
            "Content-Type": request.content_type,
            "Host": request.host,
            "X-Amz-Date": request.amz_date,
            "Authorization": authorization,
        }

    def generate_authorization_header(
        self, *, access_key: str, credential_scope: str, signature: str
    ) -> str:
        """Generate the `Authorization` header value"""
        return (
            f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
            f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
        )

    def canonical_request(self, *, request: SigningRequest) -> str:
        return self._builder.build_from_request(request=request)

    def string_to_sign(
        self,
        *,
        canonical_request: str,
        amz_date: str,
        credential_scope: str,
    ) -> str:
        return (
            f"{ALGORITHM}\n"
            f"{amz_date}\n"
            f"{credential_scope}\n"
            f"{sha256(canonical_request.encode()).hexdigest()}"
        )

    def credential_scope(self, *, date: str, region: str, service: str) -> str:
        # Scope format: <YYYYMMDD>/<AWS Region>/<AWS Service>/aws4_request
        return f"{date}/{region}/{service}/{SCOPE_TERMINATOR}"

    def derive_signing_key(
        self, *, secret_key: str, date: str, region: str, service: str
    ) -> SigningKeyLadder:
        """Derive the signing key scoped to a date, region and service.

        DateKey              = HMAC-SHA256("AWS4"+"<SecretAccessKey>", "<YYYYMMDD>")
        DateRegionKey        = HMAC-SHA256(<DateKey>, "<aws-region>")
        DateRegionServiceKey = HMAC-SHA256(<DateRegionKey>, "<aws-service>")
        SigningKey           = HMAC-SHA256(<DateRegionServiceKey>, "aws4_request")

        Each step is keyed with the raw digest of the previous one.
        """
        k_date = self._hash(key=f"AWS4{secret_key}".encode(), value=date)
        k_region = self._hash(key=k_date, value=region)
        k_service = self._hash(key=k_region, value=service)
        k_signing = self._hash(key=k_service, value=SCOPE_TERMINATOR)
        return SigningKeyLadder(
            k_date=k_date,
            k_region=k_region,
            k_service=k_service,
            k_signing=k_signing,
        )

    def _signature(
        self,
        *,
        string_to_sign: str,
        secret_key: str,
        date: str,
        region: str,
        service: str,
    ) -> str:
        ladder = self.derive_signing_key(
            secret_key=secret_key, date=date, region=region, service=service
        )
        return self._hash(key=ladder.k_signing, value=string_to_sign).hex()

    def _hash(self, key: bytes, value: str) -> bytes:
        return hmac.new(key=key, msg=value.encode(), digestmod=sha256).digest()

    def _signing_date(self, *, amz_date: str) -> str:
        """Extract the ``YYYYMMDD`` prefix of an ``x-amz-date`` value."""
        message = (
            f"Expected x-amz-date in {SIGV4_TIMESTAMP_FORMAT} form. "
            f"Received: {amz_date!r}"
        )
        if not AMZ_DATE_RE.fullmatch(amz_date):
            raise InvalidTimestampException(message)
        try:
            datetime.strptime(amz_date, SIGV4_TIMESTAMP_FORMAT)
        except ValueError as e:
            raise InvalidTimestampException(message) from e
        return amz_date[:8]

    def _validate_credentials(self, *, credentials: AWSCredentials) -> None:
        """Perform runtime checks before attempting signing."""
        if not isinstance(credentials, AWSCredentials):
            raise ValueError(
                "Received unexpected value for credentials parameter. Expected "
                f"AWSCredentials but received {type(credentials)}."
            )
        if missing := credentials.missing_fields:
            raise MissingCredentialFieldException(
                f"Credentials are missing values for: {', '.join(missing)}."
            )

"""
Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
SPDX-License-Identifier: Apache-2.0

Locate credentials for the signer.

Resolution order used by :func:`create_default_chain`:

1. ``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY`` and ``AWS_REGION`` (or
   ``AWS_DEFAULT_REGION``) environment variables.
2. The shared-file profile named by ``AWS_PROFILE``.
3. The ``default`` shared-file profile.
"""

import configparser
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ._identity import AWSCredentials
from .exceptions import (
    CredentialResolutionException,
    FieldNotFoundInProfileException,
    MissingCredentialFieldException,
    ProfileNotFoundException,
)

logger: Final = logging.getLogger(__name__)

DEFAULT_PROFILE: Final = "default"
CREDENTIALS_KEY_ID: Final = "aws_access_key_id"
CREDENTIALS_SECRET: Final = "aws_secret_access_key"
CONFIG_REGION: Final = "region"
# configparser needs a default section name; this one never appears in a file.
NO_DEFAULT_SECTION: Final = "\x00"


@runtime_checkable
class CredentialsResolver(Protocol):
    """A source able to produce :py:class:`AWSCredentials`."""

    def get_credentials(self) -> AWSCredentials:
        """Resolve credentials.

        :raises CredentialResolutionException: If the source can't supply a
            complete set of credentials.
        """
        ...


class StaticCredentialsResolver:
    """Resolve credentials supplied in code."""

    def __init__(self, *, region: str, access_key: str, secret_key: str) -> None:
        self._credentials = AWSCredentials(
            region=region, access_key=access_key, secret_key=secret_key
        )

    def get_credentials(self) -> AWSCredentials:
        if missing := self._credentials.missing_fields:
            raise MissingCredentialFieldException(
                f"Static credentials are missing: {', '.join(missing)}."
            )
        return self._credentials


class EnvironmentCredentialsResolver:
    """Resolves credentials from system environment variables."""

    def get_credentials(self) -> AWSCredentials:
        access_key = os.getenv("AWS_ACCESS_KEY_ID")
        secret_key = os.getenv("AWS_SECRET_ACCESS_KEY")
        region = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")

        if not (access_key and secret_key and region):
            raise MissingCredentialFieldException(
                "AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and AWS_REGION "
                "(or AWS_DEFAULT_REGION) are required"
            )

        return AWSCredentials(
            region=region, access_key=access_key, secret_key=secret_key
        )


class ProfileCredentialsResolver:
    """Resolves credentials from the shared ``credentials`` and ``config`` files.

    The access key and secret come from the ``[<profile>]`` section of the
    credentials file. The region comes from the config file, where the default
    profile is ``[default]`` and any other is ``[profile <name>]``.
    """

    def __init__(
        self,
        profile: str = DEFAULT_PROFILE,
        *,
        credentials_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        """Construct a ProfileCredentialsResolver.

        :param profile: Name of the profile to read.
        :param credentials_path: Path of the credentials file. Defaults to
            ``~/.aws/credentials``.
        :param config_path: Path of the config file. Defaults to ``~/.aws/config``.
        """
        self.profile = profile
        self._credentials_path = credentials_path
        self._config_path = config_path

    @property
    def credentials_path(self) -> Path:
        if self._credentials_path is not None:
            return self._credentials_path
        return Path.home() / ".aws" / "credentials"

    @property
    def config_path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".aws" / "config"

    @property
    def config_section(self) -> str:
        if self.profile == DEFAULT_PROFILE:
            return DEFAULT_PROFILE
        return f"profile {self.profile}"

    def get_credentials(self) -> AWSCredentials:
        logger.debug("Reading profile %r from shared files.", self.profile)
        credentials = self._read_section(self.credentials_path, self.profile)
        config = self._read_section(self.config_path, self.config_section)
        return AWSCredentials(
            region=self._require(config, CONFIG_REGION, self.config_path),
            access_key=self._require(
                credentials, CREDENTIALS_KEY_ID, self.credentials_path
            ),
            secret_key=self._require(
                credentials, CREDENTIALS_SECRET, self.credentials_path
            ),
        )

    def _read_section(self, path: Path, section: str) -> dict[str, str]:
        if not path.is_file():
            raise ProfileNotFoundException(
                f"Profile {self.profile!r} not found: {path} does not exist."
            )
        # Secret keys may contain '%'. A [DEFAULT] section must not leak keys
        # into other profiles.
        parser = configparser.ConfigParser(
            interpolation=None, default_section=NO_DEFAULT_SECTION
        )
        try:
            parser.read(path, encoding="utf-8")
        except (configparser.Error, UnicodeDecodeError, OSError) as e:
            raise ProfileNotFoundException(
                f"Profile {self.profile!r} not found: {path} could not be parsed."
            ) from e
        if section not in parser:
            raise ProfileNotFoundException(
                f"Section [{section}] not found in {path}."
            )
        return dict(parser[section])

    def _require(self, values: dict[str, str], key: str, path: Path) -> str:
        value = values.get(key)
        if not value:
            raise FieldNotFoundInProfileException(
                f"{key} not found for profile {self.profile!r} in {path}."
            )
        return value


class ProfileEnvironmentCredentialsResolver:
    """Resolves credentials from the profile named by ``AWS_PROFILE``."""

    def __init__(
        self,
        *,
        credentials_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._credentials_path = credentials_path
        self._config_path = config_path

    def get_credentials(self) -> AWSCredentials:
        profile = os.getenv("AWS_PROFILE")
        if not profile:
            raise ProfileNotFoundException("AWS_PROFILE is not set.")
        resolver = ProfileCredentialsResolver(
            profile,
            credentials_path=self._credentials_path,
            config_path=self._config_path,
        )
        return resolver.get_credentials()


class ChainedCredentialsResolver:
    """Attempts to resolve credentials by checking a sequence of sub-resolvers.

    If a nested resolver raises a :py:class:`CredentialResolutionException`, the
    next resolver in the chain will be attempted.
    """

    def __init__(self, resolvers: Sequence[CredentialsResolver]) -> None:
        """Construct a ChainedCredentialsResolver.

        :param resolvers: The sequence of resolvers to resolve credentials from.
        """
        self._resolvers = resolvers

    def get_credentials(self) -> AWSCredentials:
        logger.debug("Attempting to resolve credentials from resolver chain.")
        for resolver in self._resolvers:
            try:
                logger.debug(
                    "Attempting to resolve credentials from %s.", type(resolver)
                )
                return resolver.get_credentials()
            except CredentialResolutionException as e:
                logger.debug(
                    "Failed to resolve credentials from %s: %s", type(resolver), e
                )

        raise CredentialResolutionException(
            "Failed to resolve credentials from resolver chain."
        )


def create_default_chain(
    *,
    credentials_path: Path | None = None,
    config_path: Path | None = None,
) -> ChainedCredentialsResolver:
    """Creates the default credential resolver chain."""
    return ChainedCredentialsResolver(
        resolvers=(
            EnvironmentCredentialsResolver(),
            ProfileEnvironmentCredentialsResolver(
                credentials_path=credentials_path, config_path=config_path
            ),
            ProfileCredentialsResolver(
                DEFAULT_PROFILE,
                credentials_path=credentials_path,
                config_path=config_path,
            ),
        )
    )


def resolve_credentials(
    *,
    credentials_path: Path | None = None,
    config_path: Path | None = None,
) -> AWSCredentials:
    """Resolve credentials using the default chain."""
    return create_default_chain(
        credentials_path=credentials_path, config_path=config_path
    ).get_credentials()

# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
ECR registry client for checking whether an image tag already exists.
Uses the ECR ListImages API, optionally through an assumed IAM role.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .. import APP_NAME
from ..MODELS.image_config import Target
from ..errors import RemoteCheckError

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., Any]


class EcrRegistryClient:
    """
    Client for looking up image tags in ECR registries.

    A fresh boto3 session and ECR client are built for every target, scoped to
    that target's region and, when a role is configured, to temporary
    credentials for that role. Nothing is cached between targets.
    """

    def __init__(
        self,
        session_factory: Optional[SessionFactory] = None,
        role_session_name: str = APP_NAME,
    ):
        """
        Initialize the registry client.

        Args:
            session_factory: Callable returning a boto3 Session. Defaults to boto3.session.Session
            role_session_name: Session name used when assuming IAM roles.
        """
        self._session_factory = session_factory or boto3.session.Session
        self.role_session_name = role_session_name

    def client_for(self, target: Target, repo_name: str) -> Any:
        """
        Build an ECR client for a target.

        Args:
            target: Decorated target (region and role ARN must be set)
            repo_name: Repository name, used in logs and errors

        Returns:
            boto3 ECR client
        """
        try:
            session = self._session_factory(region_name=target.aws_region)

            # The role name may be blank to override a role set at the default level
            if not target.aws_role_arn:
                logger.debug("No assume IAM role defined, using normal credential chain for %s", repo_name)
                return session.client("ecr")

            logger.debug("Assuming role %s for %s", target.aws_role_arn, repo_name)
            credentials = self._assume_role(session, target, repo_name)
            assumed = self._session_factory(
                aws_access_key_id=credentials["AccessKeyId"],
                aws_secret_access_key=credentials["SecretAccessKey"],
                aws_session_token=credentials["SessionToken"],
                region_name=target.aws_region,
            )
            return assumed.client("ecr")
        except (BotoCoreError, ClientError) as e:
            raise RemoteCheckError(repo_name, f"creating ECR client: {e}", target.label) from e

    def _assume_role(self, session: Any, target: Target, repo_name: str) -> Dict[str, Any]:
        try:
            response = session.client("sts").assume_role(
                RoleArn=target.aws_role_arn,
                RoleSessionName=self.role_session_name,
            )
        except (BotoCoreError, ClientError) as e:
            raise RemoteCheckError(
                repo_name, f"assuming role {target.aws_role_arn}: {e}", target.label
            ) from e
        return response["Credentials"]

    def iter_tag_pages(self, ecr: Any, target: Target, repo_name: str) -> Iterator[List[str]]:
        """
        Yield the tags of a repository one page at a time.

        Pages are fetched lazily, so the next page is only requested once the
        caller asks for it.

        Args:
            ecr: ECR client from client_for
            target: Decorated target
            repo_name: Repository to list

        Yields:
            List of tags on each page
        """
        params: Dict[str, Any] = {
            "repositoryName": repo_name,
            "filter": {"tagStatus": "TAGGED"},
        }

        # Without an assumed role the default chain points at the caller's own
        # account, so the registry has to be named explicitly
        if not target.aws_role_arn and target.aws_account_id:
            logger.debug("No assume role so setting list images target registry %s", target.aws_account_id)
            params["registryId"] = target.aws_account_id

        try:
            for page in ecr.get_paginator("list_images").paginate(**params):
                yield [image["imageTag"] for image in page.get("imageIds", []) if image.get("imageTag")]
        except (BotoCoreError, ClientError) as e:
            raise RemoteCheckError(repo_name, f"listing Docker tags: {e}", target.label) from e

    def tag_exists(self, ecr: Any, target: Target, repo_name: str, repo_tag: str) -> bool:
        """
        Check whether a tag exists in a repository, stopping at the first match.

        Args:
            ecr: ECR client from client_for
            target: Decorated target
            repo_name: Repository to search
            repo_tag: Tag to look for

        Returns:
            True if the tag was found
        """
        pages = self.iter_tag_pages(ecr, target, repo_name)
        try:
            for tags in pages:
                if repo_tag in tags:
                    logger.debug("Found image tag %s:%s in %s", repo_name, repo_tag, target.label)
                    return True
        finally:
            pages.close()
        return False

    def check(self, target: Target, repo_name: str, repo_tag: str) -> bool:
        """
        Determine whether a target still needs the image to be built.

        Args:
            target: Decorated target
            repo_name: Repository name
            repo_tag: Tag the image should carry

        Returns:
            True if the tag is missing from the target's registry
        """
        ecr = self.client_for(target, repo_name)
        return not self.tag_exists(ecr, target, repo_name, repo_tag)

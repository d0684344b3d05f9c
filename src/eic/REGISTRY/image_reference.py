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
ECR image reference formatting.
Handles references like '111111111111.dkr.ecr.eu-west-1.amazonaws.com/repo-1:alpine'.
"""

from dataclasses import dataclass


@dataclass
class EcrImageReference:
    """
    A tagged image in a private ECR registry.

    Examples:
        - account 111111111111, region eu-west-1, repo-1:alpine ->
          111111111111.dkr.ecr.eu-west-1.amazonaws.com/repo-1:alpine
    """

    account_id: str
    region: str
    repository: str
    tag: str

    @property
    def registry(self) -> str:
        """Registry hostname for the account and region."""
        return f"{self.account_id}.dkr.ecr.{self.region}.amazonaws.com"

    @property
    def full_name(self) -> str:
        """Full image reference including registry and tag."""
        return f"{self.registry}/{self.repository}:{self.tag}"


def role_arn(account_id: str, role_name: str) -> str:
    """
    Build the ARN of an IAM role.

    Args:
        account_id: Account the role lives in.
        role_name: Name of the role.

    Returns:
        Role ARN, e.g. arn:aws:iam::111111111111:role/my-role
    """
    return f"arn:aws:iam::{account_id}:role/{role_name}"

import json
import logging
from typing import Any, Dict, List, Union
from urllib.parse import unquote

logger = logging.getLogger(__name__)


def decode_document(document: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    """IAM returns policy documents either parsed or as URL-encoded JSON."""
    if isinstance(document, dict):
        return document
    return json.loads(unquote(document))


def _as_list(value: Union[str, List[str]]) -> List[str]:
    return [value] if isinstance(value, str) else list(value)


def policy_statements(iam, policy_arn: str) -> List[Dict[str, Any]]:
    """Statements of the default version of a managed policy."""
    policy = iam.get_policy(PolicyArn=policy_arn)["Policy"]
    version = iam.get_policy_version(PolicyArn=policy_arn, VersionId=policy["DefaultVersionId"])
    document = decode_document(version["PolicyVersion"]["Document"])
    return document.get("Statement", [])


def policy_actions(iam, policy_arn: str) -> List[str]:
    """Allowed actions across all statements, in document order."""
    actions: List[str] = []
    for statement in policy_statements(iam, policy_arn):
        if statement.get("Effect") == "Allow":
            actions.extend(_as_list(statement.get("Action", [])))
    return actions


def trusted_services(iam, role_name: str) -> List[str]:
    """Service principals allowed to assume ``role_name`` via sts:AssumeRole."""
    role = iam.get_role(RoleName=role_name)["Role"]
    document = decode_document(role["AssumeRolePolicyDocument"])
    services: List[str] = []
    for statement in document.get("Statement", []):
        if "sts:AssumeRole" not in _as_list(statement.get("Action", [])):
            continue
        services.extend(_as_list(statement.get("Principal", {}).get("Service", [])))
    return services


def attached_policy_names(iam, *, role_name: str = None, group_name: str = None) -> List[str]:
    if (role_name is None) == (group_name is None):
        raise ValueError("pass exactly one of role_name or group_name")
    if role_name is not None:
        paginator = iam.get_paginator("list_attached_role_policies")
        pages = paginator.paginate(RoleName=role_name)
    else:
        paginator = iam.get_paginator("list_attached_group_policies")
        pages = paginator.paginate(GroupName=group_name)
    return [p["PolicyName"] for page in pages for p in page.get("AttachedPolicies", [])]


def user_group_names(iam, user_name: str) -> List[str]:
    pages = iam.get_paginator("list_groups_for_user").paginate(UserName=user_name)
    return [g["GroupName"] for page in pages for g in page.get("Groups", [])]


def iam_arn(account_id: str, kind: str, name: str) -> str:
    return f"arn:aws:iam::{account_id}:{kind}/{name}"

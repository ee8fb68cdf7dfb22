"""
Resource discovery for the acceptance suite.

Deployed stacks name their resources with generated suffixes, so every
lookup here matches on a known prefix or name fragment and raises
``ResourceNotFound`` when nothing matches. Bucket names are matched with
``startswith``; ARNs, queue URLs and the like contain account and region
ahead of the name, so they are matched with ``in``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..errors import ResourceNotFound

logger = logging.getLogger(__name__)

Tags = Union[Iterable[Mapping[str, str]], Mapping[str, str], None]


def tag_value(tags: Tags, key: str) -> Optional[str]:
    """Value of ``key`` in either a ``[{Key, Value}]`` list or a plain mapping."""
    if not tags:
        return None
    if isinstance(tags, Mapping):
        return tags.get(key)
    for tag in tags:
        if tag.get("Key") == key:
            return tag.get("Value")
    return None


@dataclass(frozen=True)
class InstanceSummary:
    id: str
    type: str                     # "public" if the instance has a public IP, else "private"
    instance_type: str
    tags: Dict[str, str]
    public_ip: Optional[str]
    private_ip: Optional[str]
    public_dns: Optional[str]
    vpc_id: Optional[str]
    security_group_ids: List[str]
    instance_profile_arn: Optional[str]
    raw: Dict[str, Any] = field(repr=False, compare=False, default_factory=dict)

    @classmethod
    def from_description(cls, instance: Dict[str, Any]) -> "InstanceSummary":
        public_ip = instance.get("PublicIpAddress")
        return cls(
            id=instance["InstanceId"],
            type="public" if public_ip else "private",
            instance_type=instance.get("InstanceType", ""),
            tags={t["Key"]: t["Value"] for t in instance.get("Tags", [])},
            public_ip=public_ip,
            private_ip=instance.get("PrivateIpAddress"),
            public_dns=instance.get("PublicDnsName") or None,
            vpc_id=instance.get("VpcId"),
            security_group_ids=[g["GroupId"] for g in instance.get("SecurityGroups", [])],
            instance_profile_arn=(instance.get("IamInstanceProfile") or {}).get("Arn"),
            raw=instance,
        )

    @property
    def instance_profile_name(self) -> Optional[str]:
        if not self.instance_profile_arn:
            return None
        return self.instance_profile_arn.split("/", 1)[1]


def running_instances(ec2) -> List[InstanceSummary]:
    paginator = ec2.get_paginator("describe_instances")
    pages = paginator.paginate(Filters=[{"Name": "instance-state-name", "Values": ["running"]}])
    instances = [
        InstanceSummary.from_description(instance)
        for page in pages
        for reservation in page.get("Reservations", [])
        for instance in reservation.get("Instances", [])
    ]
    logger.info(f"Found {len(instances)} running EC2 instance(s)")
    return instances


def _instance_of_type(ec2, kind: str) -> InstanceSummary:
    for instance in running_instances(ec2):
        if instance.type == kind:
            return instance
    raise ResourceNotFound(f"{kind} EC2 instance", "running")


def public_instance(ec2) -> InstanceSummary:
    return _instance_of_type(ec2, "public")


def private_instance(ec2) -> InstanceSummary:
    return _instance_of_type(ec2, "private")


def find_bucket(s3, prefix: str) -> str:
    for page in s3.get_paginator("list_buckets").paginate():
        for bucket in page.get("Buckets", []):
            if bucket["Name"].startswith(prefix):
                return bucket["Name"]
    raise ResourceNotFound("S3 bucket", prefix)


def find_topic_arn(sns, fragment: str) -> str:
    for page in sns.get_paginator("list_topics").paginate():
        for topic in page.get("Topics", []):
            if fragment in topic["TopicArn"]:
                return topic["TopicArn"]
    raise ResourceNotFound("SNS topic", fragment)


def find_queue_url(sqs, fragment: str) -> str:
    for page in sqs.get_paginator("list_queues").paginate():
        for url in page.get("QueueUrls", []):
            if fragment in url:
                return url
    raise ResourceNotFound("SQS queue", fragment)


def find_table(dynamodb, fragment: str) -> str:
    for page in dynamodb.get_paginator("list_tables").paginate():
        for name in page.get("TableNames", []):
            if fragment in name:
                return name
    raise ResourceNotFound("DynamoDB table", fragment)


def find_function(lambda_, fragment: str) -> str:
    for page in lambda_.get_paginator("list_functions").paginate():
        for function in page.get("Functions", []):
            if fragment in function["FunctionName"]:
                return function["FunctionName"]
    raise ResourceNotFound("Lambda function", fragment)


def find_db_instance(rds, fragment: str) -> Dict[str, Any]:
    for page in rds.get_paginator("describe_db_instances").paginate():
        for instance in page.get("DBInstances", []):
            if fragment in instance["DBInstanceIdentifier"]:
                return instance
    raise ResourceNotFound("RDS instance", fragment)


def _log_groups(logs, fragment: str) -> List[Dict[str, Any]]:
    groups = []
    for page in logs.get_paginator("describe_log_groups").paginate():
        groups.extend(g for g in page.get("logGroups", []) if fragment in g["logGroupName"])
    return groups


def log_group_names(logs, fragment: str) -> List[str]:
    """Names of all log groups containing ``fragment``; may be empty."""
    return [g["logGroupName"] for g in _log_groups(logs, fragment)]


def latest_log_group(logs, fragment: str) -> str:
    groups = _log_groups(logs, fragment)
    if not groups:
        raise ResourceNotFound("log group", fragment)
    return max(groups, key=lambda g: g.get("creationTime", 0))["logGroupName"]


def find_trail(cloudtrail, fragment: str) -> Dict[str, Any]:
    # describe_trails is not paged; it returns every trail in one response
    for trail in cloudtrail.describe_trails().get("trailList", []):
        if fragment in trail["Name"]:
            return trail
    raise ResourceNotFound("CloudTrail trail", fragment)


def find_subnet(ec2, vpc_id: str, tag_key: str, tag_val: str) -> Dict[str, Any]:
    """Subnet in ``vpc_id`` carrying the tag ``tag_key=tag_val``."""
    pages = ec2.get_paginator("describe_subnets").paginate(Filters=[{"Name": "vpc-id", "Values": [vpc_id]}])
    for page in pages:
        for subnet in page.get("Subnets", []):
            if tag_value(subnet.get("Tags"), tag_key) == tag_val:
                return subnet
    raise ResourceNotFound("subnet", f"{tag_key}={tag_val}")


def find_vpc_by_tag(ec2, key: str, value: str) -> Dict[str, Any]:
    pages = ec2.get_paginator("describe_vpcs").paginate(Filters=[{"Name": f"tag:{key}", "Values": [value]}])
    for page in pages:
        for vpc in page.get("Vpcs", []):
            return vpc
    raise ResourceNotFound("VPC", f"{key}={value}")

from .clients import AwsClients
from .discovery import (
    InstanceSummary,
    find_bucket,
    find_db_instance,
    find_function,
    find_queue_url,
    find_subnet,
    find_table,
    find_topic_arn,
    find_trail,
    find_vpc_by_tag,
    latest_log_group,
    log_group_names,
    private_instance,
    public_instance,
    running_instances,
    tag_value,
)
from .log_events import fetch_log_events, millis_ago, wait_for_log_messages

__all__ = [
    "AwsClients",
    "InstanceSummary",
    "fetch_log_events",
    "find_bucket",
    "find_db_instance",
    "find_function",
    "find_queue_url",
    "find_subnet",
    "find_table",
    "find_topic_arn",
    "find_trail",
    "find_vpc_by_tag",
    "latest_log_group",
    "log_group_names",
    "millis_ago",
    "private_instance",
    "public_instance",
    "running_instances",
    "tag_value",
    "wait_for_log_messages",
]

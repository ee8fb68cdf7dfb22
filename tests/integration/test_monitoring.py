"""
Acceptance checks for CloudWatch metrics and logs and the CloudTrail trail of
the serverless stack. Log contents are polled instead of waiting a fixed time.
"""
import asyncio

import pytest

from cloudprobe.aws import find_trail, latest_log_group, log_group_names, millis_ago, wait_for_log_messages


@pytest.fixture(scope="module")
def prefix(probe_config):
    return probe_config.serverless_stack_prefix


@pytest.fixture(scope="module")
def trail(aws, prefix):
    return find_trail(aws.cloudtrail, f"{prefix}-Trail")


def _streams(aws, group):
    return aws.logs.describe_log_streams(logGroupName=group)["logStreams"]


class TestLogCollection:
    def test_instance_metrics_and_lambda_logs(self, aws, public_ec2, prefix):
        metrics = aws.cloudwatch.list_metrics(
            Namespace="AWS/EC2",
            Dimensions=[{"Name": "InstanceId", "Value": public_ec2.id}],
        )["Metrics"]
        assert metrics

        groups = log_group_names(aws.logs, f"/aws/lambda/{prefix}")
        assert groups
        assert any(_streams(aws, group) for group in groups)

    @pytest.mark.parametrize("group_fragment", ["/var/log/cloud-init", "/var/log/messages", "/var/log/{prefix}-app"])
    def test_instance_log_groups_have_streams(self, aws, prefix, group_fragment):
        group = latest_log_group(aws.logs, group_fragment.format(prefix=prefix))
        assert _streams(aws, group)

    def test_event_handler_log_group(self, aws, prefix):
        group = latest_log_group(aws.logs, f"/aws/lambda/{prefix}-EventHandlerLambda")
        assert _streams(aws, group)


class TestLogContents:
    def test_notifications_are_logged(self, aws, app_api, image_bytes, prefix, probe_config):
        since = millis_ago(30)
        response = app_api.upload_image("cloudprobe-monitoring.jpg", image_bytes)
        assert response.status_code == 200

        group = latest_log_group(aws.logs, f"/aws/lambda/{prefix}-EventHandlerLambda")
        asyncio.run(wait_for_log_messages(
            aws.logs,
            group,
            ["object_key", "object_type", "last_modified", "object_size", "download_link"],
            since_ms=since,
            policy=probe_config.log_policy,
        ))

    def test_api_requests_are_logged(self, aws, app_api, image_bytes, prefix, probe_config):
        since = millis_ago(30)
        created = app_api.upload_image("cloudprobe-requests.jpg", image_bytes)
        assert created.status_code == 200
        assert app_api.list_images().status_code == 200
        assert app_api.delete_image(created.json()["id"]).status_code == 200

        group = latest_log_group(aws.logs, f"/var/log/{prefix}-app")
        asyncio.run(wait_for_log_messages(
            aws.logs,
            group,
            ["POST /api/image HTTP/1.1", "GET /api/image HTTP/1.1", "DELETE /api/image"],
            since_ms=since,
            policy=probe_config.log_policy,
        ))


class TestCloudTrail:
    def test_trail_settings(self, aws, trail, probe_config):
        assert trail["HomeRegion"] == probe_config.region
        assert trail["IncludeGlobalServiceEvents"] is True
        assert trail["IsMultiRegionTrail"] is True
        assert trail["IsOrganizationTrail"] is False
        assert trail["LogFileValidationEnabled"] is True
        assert "KmsKeyId" not in trail

    def test_trail_is_logging(self, aws, trail):
        assert aws.cloudtrail.get_trail_status(Name=trail["TrailARN"])["IsLogging"] is True

    def test_trail_tagged(self, aws, trail, probe_config):
        tag_list = aws.cloudtrail.list_tags(ResourceIdList=[trail["TrailARN"]])["ResourceTagList"]
        tags = {t["Key"]: t["Value"] for t in tag_list[0].get("TagsList", [])}
        assert tags.get(probe_config.required_tag_key) == probe_config.required_tag_value

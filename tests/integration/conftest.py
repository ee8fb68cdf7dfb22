"""
Shared pytest fixtures for the live acceptance suite.

Every test in this directory talks to real AWS resources and is skipped
unless CLOUDPROBE_LIVE=1. Use ``python run.py live`` to run it.
"""
import os
from pathlib import Path

import pytest

from cloudprobe.app_api import ImageApiClient
from cloudprobe.aws import AwsClients, public_instance
from cloudprobe.config import ProbeConfig
from cloudprobe.logging_setup import configure_logging
from cloudprobe.mail import MailtrapClient

INTEGRATION_DIR = Path(__file__).resolve().parent


def pytest_configure(config):
    config.addinivalue_line("markers", "live: talks to the deployed stacks; needs CLOUDPROBE_LIVE=1")


def pytest_collection_modifyitems(config, items):
    """Mark live tests, skip them when not enabled, and print the test cases to be run."""
    live = os.getenv("CLOUDPROBE_LIVE") == "1"
    skip_live = pytest.mark.skip(reason="set CLOUDPROBE_LIVE=1 to run acceptance tests")
    selected = []
    for item in items:
        if INTEGRATION_DIR not in Path(item.path).resolve().parents:
            continue
        item.add_marker(pytest.mark.live)
        if not live:
            item.add_marker(skip_live)
        selected.append(item)

    if not live or not selected:
        return
    print("\n" + "=" * 80)
    print("TEST CASES TO BE RUN:")
    print("=" * 80)
    for i, item in enumerate(selected, 1):
        test_name = item.nodeid
        # Extract just the test name for cleaner output
        if "::" in test_name:
            parts = test_name.split("::")
            if len(parts) >= 3:
                test_name = f"{parts[0]}::{parts[1]}::{parts[2]}"
        print(f"  {i:3d}. {test_name}")
    print("=" * 80 + "\n")


def pytest_runtest_setup(item):
    """Print test name when it starts running."""
    if item.get_closest_marker("live") is None:
        return
    test_name = item.nodeid.split("::")[-1]
    class_name = item.cls.__name__ if item.cls else ""
    if class_name:
        print(f"\n[RUNNING] {class_name}::{test_name}")
    else:
        print(f"\n[RUNNING] {test_name}")


@pytest.fixture(scope="session")
def probe_config():
    config = ProbeConfig.from_env()
    config.require("aws_account_id")
    return config


@pytest.fixture(scope="session")
def aws(probe_config):
    clients = AwsClients.from_config(probe_config)
    configure_logging(probe_config, session=clients.session)
    return clients


@pytest.fixture(scope="session")
def public_ec2(aws):
    return public_instance(aws.ec2)


@pytest.fixture(scope="session")
def app_api(public_ec2, probe_config):
    """Client for the application served by the public instance."""
    return ImageApiClient(f"http://{public_ec2.public_ip}", timeout=probe_config.http_timeout)


@pytest.fixture
def mailtrap(probe_config):
    """Factory for a MailtrapClient; use it as ``async with mailtrap() as mail:`` inside asyncio.run."""
    probe_config.require("mailtrap_token", "mailtrap_account_id", "mailtrap_inbox_id", "mailtrap_email")
    return lambda: MailtrapClient.from_config(probe_config)


@pytest.fixture(scope="session")
def image_bytes():
    """A small valid JPEG to upload."""
    return bytes.fromhex(
        "ffd8ffe000104a46494600010100000100010000ffdb004300080606070605080707070909080a0c140d0c0b0b0c1912130f"
        "141d1a1f1e1d1a1c1c20242e2720222c231c1c2837292c30313434341f27393d38323c2e333432ffc0000b080001000101"
        "011100ffc4001f0000010501010101010100000000000000000102030405060708090a0bffc400b5100002010303020403"
        "050504040000017d01020300041105122131410613516107227114328191a1082342b1c11552d1f02433627282090a1617"
        "18191a25262728292a3435363738393a434445464748494a535455565758595a636465666768696a737475767778797a83"
        "8485868788898a92939495969798999aa2a3a4a5a6a7a8a9aab2b3b4b5b6b7b8b9bac2c3c4c5c6c7c8c9cad2d3d4d5d6d7"
        "d8d9dae1e2e3e4e5e6e7e8e9eaf1f2f3f4f5f6f7f8f9faffda0008010100003f00fbd3ffd9"
    )

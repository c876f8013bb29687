import logging

import boto3
import pytest
from botocore.stub import Stubber

import awsassume.assume
from stubs import AWS_CONFIG, AWS_CREDENTIALS


@pytest.fixture
def log():
    return logging.getLogger('awsassume.tests')


@pytest.fixture
def aws_files(tmp_path, monkeypatch):
    """Point botocore at throwaway shared config and credentials files."""
    config_file = tmp_path / 'config'
    config_file.write_text(AWS_CONFIG)
    credentials_file = tmp_path / 'credentials'
    credentials_file.write_text(AWS_CREDENTIALS)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.setenv('AWS_CONFIG_FILE', str(config_file))
    monkeypatch.setenv('AWS_SHARED_CREDENTIALS_FILE', str(credentials_file))
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    for name in ('AWS_PROFILE', 'AWS_DEFAULT_PROFILE', 'AWS_ACCESS_KEY_ID',
            'AWS_SECRET_ACCESS_KEY', 'AWS_SESSION_TOKEN', 'AWS_SECURITY_TOKEN',
            'AWSASSUME_CONFIG'):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def sts_client(aws_files):
    return boto3.Session(profile_name='default').client('sts', region_name='us-east-1')


@pytest.fixture
def stubbed_sts(sts_client, monkeypatch):
    """
    Replace awsassume.assume.get_sts_client with one returning a
    stubbed client.  Source profiles requested are recorded in
    stubbed_sts.source_profiles.
    """
    stubber = Stubber(sts_client)
    stubber.source_profiles = []

    def get_sts_client(log, source_profile, region_name=None):
        stubber.source_profiles.append(source_profile)
        return sts_client

    monkeypatch.setattr(awsassume.assume, 'get_sts_client', get_sts_client)
    with stubber:
        yield stubber


@pytest.fixture
def no_sts(monkeypatch):
    """Fail the test if anything tries to build an sts client."""
    def get_sts_client(log, source_profile, region_name=None):
        raise AssertionError('sts client must not be created')

    monkeypatch.setattr(awsassume.assume, 'get_sts_client', get_sts_client)

